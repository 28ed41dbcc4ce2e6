""" Time keeping for the retry loops. A :class:`Clock` answers what time it
    is and blocks for a requested duration; a :class:`Ticker` combines a
    clock with an absolute deadline and a fixed tick interval, and is the
    single suspension point for every wait loop in nsminit.

    The :class:`FakeClock` advances instantly when asked to sleep, which
    allows the retry logic to be exercised deterministically.
"""

import threading
import time


class Clock:
    """ Wall clock, based on the monotonic system timer so that adjustments
        to the system time do not move a deadline.
    """

    def __init__(self):
        self.alarm = threading.Event()


    def now(self):
        return time.monotonic()


    def sleep(self, seconds):
        if seconds > 0:
            self.alarm.wait(seconds)


# end of class Clock



class FakeClock(Clock):
    """ A :class:`Clock` that only moves when :func:`sleep` or
        :func:`advance` is called. Every requested sleep is recorded in
        :ivar:`sleeps` for later inspection.
    """

    def __init__(self, start=0.0):
        self.current = float(start)
        self.sleeps = list()


    def now(self):
        return self.current


    def sleep(self, seconds):
        self.sleeps.append(seconds)
        if seconds > 0:
            self.current += seconds


    def advance(self, seconds):
        """ Move the clock forward without recording a sleep; used by
            test doubles to simulate the latency of a remote call.
        """

        self.current += seconds


# end of class FakeClock



class Ticker:
    """ The retry context for one wait loop. The *deadline* is a duration in
        seconds, converted to an absolute expiration time when the
        :class:`Ticker` is created; it is never extended. Ticks occur every
        *interval* seconds starting at creation time, the first one
        immediately.

        :func:`wait` blocks until the next tick or the expiration, whichever
        comes first, and returns True for a tick and False for the deadline.
        If an attempt runs long the missed ticks are skipped; the cadence is
        always anchored to the creation time, and ticks are never delivered
        early to catch up.

        :ivar last_error: The most recent error observed by the owner of
            this loop. The :class:`Ticker` does not interpret it.
    """

    def __init__(self, deadline, interval, clock=None):

        deadline = float(deadline)
        interval = float(interval)

        if deadline <= 0:
            raise ValueError('deadline must be positive: ' + repr(deadline))
        if interval <= 0:
            raise ValueError('interval must be positive: ' + repr(interval))

        if clock is None:
            clock = Clock()

        self.clock = clock
        self.deadline = deadline
        self.interval = interval
        self.last_error = None

        self.start = clock.now()
        self.expiration = self.start + deadline
        self.next = self.start
        self.index = 0
        self.ticks = 0


    def elapsed(self):
        return self.clock.now() - self.start


    def remaining(self):
        """ Seconds left before the deadline fires, never negative.
        """

        remaining = self.expiration - self.clock.now()
        if remaining < 0:
            remaining = 0
        return remaining


    def due(self, index):
        """ Return the absolute time of tick number *index*. Tick times are
            always derived from the start time, so rounding errors do not
            accumulate over many ticks.
        """

        return self.start + index * self.interval


    def wait(self):

        now = self.clock.now()

        if now >= self.expiration:
            return False

        # Skip any ticks that were missed while the previous attempt was
        # running. The first tick is due at creation time, and is never
        # skipped.

        if self.ticks > 0:
            while self.due(self.index) < now:
                self.index += 1

        self.next = self.due(self.index)

        if self.next >= self.expiration:
            self.clock.sleep(self.expiration - now)
            return False

        self.clock.sleep(max(self.next - now, 0))
        self.index += 1
        self.ticks += 1
        return True


# end of class Ticker


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
