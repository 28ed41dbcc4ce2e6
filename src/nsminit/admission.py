""" Request admission of a data-plane connection for one network service.
    Each attempt is classified by :func:`classify`; a permanent outcome ends
    the attempts immediately, a transient one is retried on a fixed cadence
    until the deadline expires.
"""

import enum
import logging

from . import clock as clockmodule
from .errors import AdmissionRejected, AdmissionTimeout, BrokerError
from .protocol.fields import StatusCode


logger = logging.getLogger(__name__)


class Classification(enum.Enum):
    SUCCESS = 'success'
    PERMANENT = 'permanent'
    TRANSIENT = 'transient'


class AdmissionState(enum.Enum):
    """ Where the admission of a single service stands. Every state other
        than :attr:`POLLING` is terminal.
    """

    POLLING = 'polling'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    TIMED_OUT = 'timed out'


# Status codes that tell us the request can never succeed: ABORTED is the
# broker giving up on the request outright, NOT_FOUND means the named
# service does not exist. ALREADY_EXISTS means a prior admission with the
# same request id is still being programmed; it, and everything else, is
# worth another attempt.

_by_code = {
    StatusCode.ABORTED: Classification.PERMANENT,
    StatusCode.NOT_FOUND: Classification.PERMANENT,
    StatusCode.ALREADY_EXISTS: Classification.TRANSIENT,
    StatusCode.OTHER: Classification.TRANSIENT,
}


def classify(result, error=None):
    """ Map the outcome of one admission attempt to a :class:`Classification`.
        Exactly one of *result* (an
        :class:`nsminit.protocol.AdmissionResult`) and *error* (a
        :class:`nsminit.errors.BrokerError`) is expected to be set.

        A result that was not accepted, but carries no error code, is
        treated as transient.
    """

    if error is None:
        if result is not None and result.accepted:
            return Classification.SUCCESS
        return Classification.TRANSIENT

    code = StatusCode.parse(error.code)
    return _by_code[code]


def request_admission(broker, request, deadline, interval, clock=None):
    """ Ask the *broker* to admit *request*, an
        :class:`nsminit.protocol.AdmissionRequest`, and return the
        connection parameters once it is accepted. The same request is sent
        on every attempt; the first attempt is made immediately and later
        ones every *interval* seconds.

        Raises :class:`nsminit.errors.AdmissionRejected` as soon as the
        broker returns a permanent error, and
        :class:`nsminit.errors.AdmissionTimeout` if *deadline* seconds pass
        with only transient outcomes. A rejection only carries the
        diagnostic of the attempt that was rejected; a timeout carries the
        last diagnostic seen on any attempt.
    """

    service = request.service_name
    ticker = clockmodule.Ticker(deadline, interval, clock)
    diagnostic = ''

    while ticker.wait():
        result = None
        error = None

        try:
            result = broker.request_admission(request, timeout=ticker.remaining())
        except BrokerError as caught:
            error = caught
            ticker.last_error = caught

        classification = classify(result, error)

        current = ''
        if result is not None and result.admission_error:
            current = result.admission_error
            diagnostic = current

        if classification is Classification.SUCCESS:
            logger.debug("admission for %s accepted after %d attempt(s)", service, ticker.ticks)
            return result.parameters

        if classification is Classification.PERMANENT:
            raise AdmissionRejected(service, error.code, error.text, current)

        if error is None:
            # No error code, yet not accepted. Possibly an unaccounted error
            # condition on the broker side; there is nothing to go on but
            # the diagnostic.
            logger.info("broker failed connection request with an admission error: %s, request ID: %s",
                        diagnostic, request.request_id)
        elif StatusCode.parse(error.code) is StatusCode.ALREADY_EXISTS:
            logger.info("broker indicates a non-completed connection request for %s, retrying in %.1f seconds",
                        service, ticker.interval)
        else:
            logger.warning("connection request for %s failed with unexpected error: %s, retrying in %.1f seconds",
                           service, error, ticker.interval)

    raise AdmissionTimeout(service, ticker.deadline, ticker.last_error, diagnostic)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
