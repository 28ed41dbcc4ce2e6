""" Command line entry point. Runs once, as the init step of a workload:
    exits 0 when every requested network service was admitted (or there was
    nothing to request), and 1 otherwise.
"""

import argparse
import logging
import sys

from . import begin
from . import config
from . import identity
from .errors import InitError
from .transport.zmq import Client


logger = logging.getLogger(__name__)


def parse_arguments(argv=None):

    description = 'Request network service connections from the local broker.'
    parser = argparse.ArgumentParser(prog='nsm-init', description=description)

    parser.add_argument('--nsm-socket', dest='socket', default=None,
        help='Location of the broker client access socket. Defaults to $NSM_SOCKET, then %s.' % (config.default_socket))
    parser.add_argument('--services', default=None,
        help='Path of the desired network service document. Defaults to $NSM_SERVICES; if unset there is nothing to do.')
    parser.add_argument('--namespace', default=None,
        help='Namespace of this workload. Defaults to $INIT_NAMESPACE.')
    parser.add_argument('--name', default=None,
        help='Name of this workload. Defaults to $HOSTNAME.')
    parser.add_argument('--request-id', dest='request_id', default=None,
        help='Idempotency token for admission requests. Defaults to $NSM_REQUEST_ID.')
    parser.add_argument('--deadline', type=float, default=None,
        help='Seconds to keep retrying each phase (default %.0f).' % (config.default_deadline))
    parser.add_argument('--interval', type=float, default=None,
        help='Seconds between attempts (default %.0f).' % (config.default_interval))
    parser.add_argument('--call-timeout', dest='call_timeout', type=float, default=None,
        help='Upper bound for a single broker call (default %.0f).' % (config.default_call_timeout))
    parser.add_argument('-v', '--verbose', action='store_true',
        help='Enable debug logging.')

    return parser.parse_args(argv)


def main(argv=None):

    arguments = parse_arguments(argv)

    if arguments.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    try:
        return _main(arguments)
    except InitError as e:
        logger.error("nsm client: %s, exiting...", e)
        return 1


def _main(arguments):

    configuration = config.Configuration.from_arguments(arguments)

    if configuration.services is None:
        logger.info("nsm client: no desired network service document was provided, exiting...")
        return 0

    services = config.load_services(configuration.services)

    if len(services) == 0:
        logger.info("nsm client: no network services requested in %s, exiting...", configuration.services)
        return 0

    requester = identity.identity(configuration)
    netns = identity.current_netns()

    broker = Client(configuration.socket, timeout=configuration.call_timeout)
    logger.info("nsm client: connection to broker on socket %s succeeded", configuration.socket)

    try:
        report = begin.run(configuration, broker, services, requester, netns)
    finally:
        broker.close()

    report.check()

    logger.info("nsm client: initialization is completed successfully, exiting...")
    return 0


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
