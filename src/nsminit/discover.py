""" Wait for the broker to answer a discovery request. The broker may still be
    starting when the init process runs, so a failed discovery call is not
    fatal: it is retried on a fixed cadence until a call succeeds or the
    deadline expires.
"""

import logging

from . import clock as clockmodule
from .errors import BrokerError, DiscoveryTimeout


logger = logging.getLogger(__name__)


def discover(broker, deadline, interval, clock=None):
    """ Return the list of :class:`nsminit.protocol.ServiceDescriptor`
        instances known to the *broker*, a
        :class:`nsminit.transport.BrokerClient`. The first attempt is made
        immediately, later attempts every *interval* seconds; if no attempt
        succeeds within *deadline* seconds a
        :class:`nsminit.errors.DiscoveryTimeout` is raised, carrying the
        last error returned by the broker.

        An empty list is a successful discovery. Errors from the transport
        itself are not retried and propagate to the caller.
    """

    ticker = clockmodule.Ticker(deadline, interval, clock)

    while ticker.wait():
        try:
            services = broker.discover(timeout=ticker.remaining())
        except BrokerError as error:
            ticker.last_error = error
            logger.info("discovery request failed with: %s, re-attempting in %.1f seconds", error, ticker.interval)
            continue

        logger.debug("discovery succeeded after %d attempt(s), %.1f seconds", ticker.ticks, ticker.elapsed())
        return list(services)

    raise DiscoveryTimeout(ticker.deadline, ticker.last_error)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
