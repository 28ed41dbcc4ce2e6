""" Sequence the two phases of initialization: discover what the broker has
    to offer, then request admission for each desired network service in
    turn. The first service that cannot be admitted ends the run; services
    admitted before it are left in place.
"""

import logging

from . import admission
from . import discover
from .admission import AdmissionState
from .errors import AdmissionError, AdmissionRejected, DiscoveryTimeout
from .protocol.message import AdmissionRequest


logger = logging.getLogger(__name__)


class Report:
    """ The outcome of one run.

        :ivar discovered: Services the broker reported, or None if discovery
            did not succeed.
        :ivar admitted: (service name, connection parameters) pairs, in the
            order the services were admitted.
        :ivar states: Terminal :class:`AdmissionState` for every service an
            admission was attempted for, keyed by service name.
        :ivar failure: The error that ended the run early, if any.
    """

    def __init__(self):
        self.discovered = None
        self.admitted = list()
        self.states = dict()
        self.failure = None


    @property
    def ok(self):
        return self.failure is None


    def check(self):
        """ Raise the error that ended the run, if there is one.
        """

        if self.failure is not None:
            raise self.failure


# end of class Report



def log_services(services):

    logger.info("list of discovered network services:")
    for service in services:
        logger.info("      network service: %s/%s", service.namespace, service.name)
        for channel in service.channels:
            logger.info("            channel: %s/%s", channel.namespace, channel.name)
            for interface in channel.interfaces:
                logger.info("                  interface type: %s preference: %s", interface.type, interface.preference)

    logger.info("%d network services discovered from the broker", len(services))


def run(configuration, broker, services, requester, netns, clock=None):
    """ Run the init sequence against *broker*, a
        :class:`nsminit.transport.BrokerClient`, for the
        :class:`nsminit.protocol.DesiredService` entries in *services*.
        The *requester* identity and the *netns* handle are sent with every
        admission request, as is the request id from *configuration*.

        Returns a :class:`Report`. A discovery timeout or an admission
        failure is recorded in :ivar:`Report.failure` rather than raised;
        transport errors propagate.
    """

    report = Report()
    deadline = configuration.deadline
    interval = configuration.interval

    try:
        report.discovered = discover.discover(broker, deadline, interval, clock)
    except DiscoveryTimeout as error:
        report.failure = error
        return report

    if len(report.discovered) == 0:
        # The broker has no network services, so there is nothing to
        # configure for this client.
        logger.info("the broker does not have any network services")
        return report

    log_services(report.discovered)

    for service in services:
        request = AdmissionRequest(
            request_id=configuration.request_id,
            requester=requester,
            service_name=service.name,
            netns=netns,
            interfaces=service.interfaces,
        )

        logger.info("connection request: %s, number of interfaces: %d", request.service_name, len(request.interfaces))
        report.states[service.name] = AdmissionState.POLLING

        try:
            parameters = admission.request_admission(broker, request, deadline, interval, clock)
        except AdmissionError as error:
            if isinstance(error, AdmissionRejected):
                report.states[service.name] = AdmissionState.REJECTED
            else:
                report.states[service.name] = AdmissionState.TIMED_OUT
            report.failure = error
            return report

        report.states[service.name] = AdmissionState.ACCEPTED
        report.admitted.append((service.name, parameters))
        logger.info("connection to network service %s succeeded, connection parameters: %s", service.name, parameters)

    return report


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
