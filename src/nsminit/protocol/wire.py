""" JSON mapping of the broker protocol, and the multipart framing used to
    carry it.

Request (client -> broker)
    version, id, op, payload_json

Response (broker -> client)
    version, id, REP, payload_json

A failed call is a response whose payload carries an ``error`` object with
a ``code`` and ``text``; anything else is the result of the operation.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import BrokerError
from .fields import CONNECT, DISCOVER, REP, StatusCode
from .message import (
    AdmissionRequest,
    AdmissionResult,
    Channel,
    Interface,
    Request,
    ServiceDescriptor,
    version,
)


def dumps(payload: Any) -> bytes:
    """ Canonical JSON encoding: keys sorted, no whitespace. Encoding the
        same value twice always produces the same bytes.
    """

    if payload is None:
        return b''

    return json.dumps(payload, sort_keys=True, separators=(',', ':')).encode()


def loads(payload_bytes: bytes) -> Any:
    if payload_bytes in (b'', None):
        return None

    return json.loads(payload_bytes)


# Data model <-> JSON-ready dictionaries.

def interface_to_dict(interface: Interface) -> Dict[str, str]:
    return {'type': interface.type, 'preference': interface.preference}


def interface_from_dict(raw: Dict[str, Any]) -> Interface:
    return Interface(str(raw['type']), str(raw.get('preference') or ''))


def _metadata(raw: Dict[str, Any]) -> Tuple[str, str]:
    metadata = raw.get('metadata') or dict()
    return metadata.get('name', ''), metadata.get('namespace', '')


def service_from_dict(raw: Dict[str, Any]) -> ServiceDescriptor:

    name, namespace = _metadata(raw)

    channels = list()
    for raw_channel in raw.get('channel') or ():
        channel_name, channel_namespace = _metadata(raw_channel)
        interfaces = tuple(interface_from_dict(x) for x in raw_channel.get('interface') or ())
        channels.append(Channel(channel_name, channel_namespace, interfaces))

    return ServiceDescriptor(name, namespace, tuple(channels))


def service_to_dict(service: ServiceDescriptor) -> Dict[str, Any]:

    channels = list()
    for channel in service.channels:
        channels.append({
            'metadata': {'name': channel.name, 'namespace': channel.namespace},
            'interface': [interface_to_dict(x) for x in channel.interfaces],
        })

    return {
        'metadata': {'name': service.name, 'namespace': service.namespace},
        'channel': channels,
    }


def admission_to_dict(request: AdmissionRequest) -> Dict[str, Any]:
    return {
        'request_id': request.request_id,
        'metadata': {
            'name': request.requester.name,
            'namespace': request.requester.namespace,
        },
        'network_service_name': request.service_name,
        'linux_namespace': request.netns,
        'interface': [interface_to_dict(x) for x in request.interfaces],
    }


def result_from_dict(raw: Dict[str, Any]) -> AdmissionResult:

    accepted = bool(raw.get('accepted', False))
    parameters = raw.get('connection_parameters')
    admission_error = raw.get('admission_error') or ''

    if not accepted:
        parameters = None
    elif parameters is None:
        parameters = dict()

    return AdmissionResult(accepted, parameters, admission_error)


def error_from_dict(raw: Dict[str, Any]) -> BrokerError:
    """ Translate an ``error`` object into a :class:`BrokerError`. Codes
        outside the known set become :attr:`StatusCode.OTHER`, with the
        original code name preserved in the text.
    """

    raw_code = raw.get('code')
    text = raw.get('text') or ''

    code = StatusCode.parse(raw_code)
    if code is StatusCode.OTHER and raw_code not in (None, StatusCode.OTHER.value):
        if text:
            text = "%s: %s" % (raw_code, text)
        else:
            text = str(raw_code)

    return BrokerError(code, text)


# Operation payloads.

def discover_request() -> Request:
    return Request(DISCOVER)


def connect_request(admission: AdmissionRequest) -> Request:
    return Request(CONNECT, admission_to_dict(admission))


def check_error(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """ Raise the :class:`BrokerError` carried by a response *payload*, if
        there is one; otherwise return the payload.
    """

    if payload is None:
        return dict()

    error = payload.get('error')
    if error:
        raise error_from_dict(error)

    return payload


def services_from_response(payload: Optional[Dict[str, Any]]) -> List[ServiceDescriptor]:
    payload = check_error(payload)
    raw_services = payload.get('network_service') or ()
    return [service_from_dict(x) for x in raw_services]


def result_from_response(payload: Optional[Dict[str, Any]]) -> AdmissionResult:
    payload = check_error(payload)
    return result_from_dict(payload)


# Multipart framing.

def to_request_frames(request: Request) -> Tuple[bytes, ...]:
    return (version, request.id, request.op.encode(), dumps(request.payload))


def from_request_frames(parts: Sequence[bytes]) -> Request:
    """ Decode the frames of an inbound request; used by brokers, including
        the test broker. A ROUTER identity prefix, if present, is dropped.
    """

    if len(parts) == 5:
        parts = parts[1:]

    if len(parts) != 4:
        raise ValueError("malformed request: %d frames" % (len(parts)))

    their_version, id, op, payload = parts

    if their_version != version:
        raise ValueError("message is protocol %s, recipient expects %s" % (repr(their_version), repr(version)))

    return Request(op.decode(), loads(payload), id)


def to_response_frames(id: bytes, payload: Any) -> Tuple[bytes, ...]:
    return (version, id, REP.encode(), dumps(payload))


def from_response_frames(parts: Sequence[bytes]) -> Tuple[bytes, Optional[Dict[str, Any]]]:
    """ Decode a response into its identification number and payload. A
        version mismatch is reported as an error payload so that it reaches
        the original caller.
    """

    if len(parts) < 4:
        raise ValueError("malformed response: %d frames" % (len(parts)))

    their_version, id, response_type, payload = parts[:4]

    if their_version != version:
        error = dict()
        error['code'] = StatusCode.ABORTED.value
        error['text'] = "message is protocol %s, recipient expects %s" % (repr(their_version), repr(version))
        return id, {'error': error}

    if response_type != REP.encode():
        raise ValueError('unexpected response type: ' + repr(response_type))

    return id, loads(payload)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
