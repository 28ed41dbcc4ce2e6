""" Configuration for a single run of the init process. A
    :class:`Configuration` is built once at startup, from command line
    arguments and the environment, and passed by reference to everything
    that needs it; it is never modified afterwards.

    The list of network services this workload wants is read from a YAML
    (or JSON) document, typically a mounted configuration resource, by
    :func:`load_services`.
"""

import os
from typing import List, NamedTuple, Optional

import yaml

from .errors import ConfigurationError
from .protocol.message import DesiredService, Interface


# Location of the broker's client socket when none is specified.

default_socket = '/var/lib/networkservicemesh/nsm.ligato.io.sock'

# How long to keep trying, and how often, for both discovery and admission.

default_deadline = 60.0
default_interval = 2.0

# Upper bound for any single call to the broker.

default_call_timeout = 5.0

services_key = 'networkService'


class Configuration(NamedTuple):
    """ Immutable settings for one run.

        :ivar socket: Path (or ZeroMQ endpoint) of the broker socket.
        :ivar services: Path of the desired-service document; None means
            there is nothing to configure.
        :ivar namespace: Namespace of the requesting workload.
        :ivar name: Name of the requesting workload.
        :ivar request_id: Idempotency token sent with every admission request.
        :ivar deadline: Seconds to keep retrying each phase.
        :ivar interval: Seconds between attempts.
        :ivar call_timeout: Upper bound, in seconds, for a single broker call.
    """

    socket: str = default_socket
    services: Optional[str] = None
    namespace: str = ''
    name: str = ''
    request_id: str = ''
    deadline: float = default_deadline
    interval: float = default_interval
    call_timeout: float = default_call_timeout

    @classmethod
    def from_arguments(cls, arguments, environ=None):
        """ Build a :class:`Configuration` from parsed command line
            *arguments* (an :class:`argparse.Namespace`, or anything with
            the same attributes), falling back to the environment for
            anything not given on the command line.
        """

        if environ is None:
            environ = os.environ

        socket = _pick(arguments, 'socket', environ, 'NSM_SOCKET') or default_socket
        services = _pick(arguments, 'services', environ, 'NSM_SERVICES') or None
        namespace = _pick(arguments, 'namespace', environ, 'INIT_NAMESPACE') or ''
        name = _pick(arguments, 'name', environ, 'HOSTNAME') or ''
        request_id = _pick(arguments, 'request_id', environ, 'NSM_REQUEST_ID') or ''

        deadline = _number(arguments, 'deadline', default_deadline)
        interval = _number(arguments, 'interval', default_interval)
        call_timeout = _number(arguments, 'call_timeout', default_call_timeout)

        configuration = cls(socket, services, namespace, name, request_id,
                            float(deadline), float(interval), float(call_timeout))
        configuration.validate()
        return configuration


    def validate(self):

        if self.deadline <= 0:
            raise ConfigurationError('deadline must be positive: ' + repr(self.deadline))

        if self.interval <= 0:
            raise ConfigurationError('interval must be positive: ' + repr(self.interval))

        if self.call_timeout <= 0:
            raise ConfigurationError('call timeout must be positive: ' + repr(self.call_timeout))

        if self.services is None:
            # Nothing will be requested; identity does not matter.
            return

        if self.namespace == '':
            raise ConfigurationError('cannot detect namespace, make sure INIT_NAMESPACE is set')

        if self.name == '':
            raise ConfigurationError('cannot detect workload name, make sure HOSTNAME is set')

        if self.request_id == '':
            raise ConfigurationError('no request ID, make sure NSM_REQUEST_ID is set')


# end of class Configuration



def _pick(arguments, attribute, environ, variable):
    value = getattr(arguments, attribute, None)
    if value:
        return value
    return environ.get(variable)


def _number(arguments, attribute, default):

    # Zero is passed through for validate() to reject.

    value = getattr(arguments, attribute, None)
    if value is None:
        return default
    return value


def load_services(path) -> List[DesiredService]:
    """ Read the desired-service document at *path* and return the list of
        :class:`nsminit.protocol.DesiredService` instances it describes, in
        document order.

        The document is either a mapping with a ``networkService`` key, or
        the value of that key on its own (which is what a mounted
        configuration resource looks like). The value is a list of entries
        with a ``name`` and an optional ``serviceInterface`` list; it may
        also be a string containing such a list.
    """

    try:
        with open(path, 'r') as stream:
            document = yaml.safe_load(stream)
    except OSError as e:
        raise ConfigurationError(f"failure to access {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {path}: {e}") from e

    return parse_services(document, path)


def parse_services(document, origin='document') -> List[DesiredService]:

    if document is None:
        return list()

    if isinstance(document, dict):
        try:
            document = document[services_key]
        except KeyError:
            raise ConfigurationError(f"missing required key '{services_key}:' in {origin}")

    if isinstance(document, str):
        try:
            document = yaml.safe_load(document)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML under '{services_key}:' in {origin}: {e}") from e

    if document is None:
        return list()

    if not isinstance(document, list):
        raise ConfigurationError(f"'{services_key}:' in {origin} must be a list")

    services = list()

    for entry in document:
        if not isinstance(entry, dict) or not entry.get('name'):
            raise ConfigurationError(f"network service entry without a name in {origin}: {entry!r}")

        interfaces = list()
        for raw in entry.get('serviceInterface') or ():
            try:
                interfaces.append(Interface(str(raw['type']), str(raw.get('preference') or '')))
            except (KeyError, TypeError, AttributeError):
                raise ConfigurationError(f"invalid interface for network service {entry['name']} in {origin}: {raw!r}")

        services.append(DesiredService(str(entry['name']), tuple(interfaces)))

    return services


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
