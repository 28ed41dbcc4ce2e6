""" Value types exchanged with the broker. Everything here is immutable: the
    broker produces :class:`ServiceDescriptor` instances that are consumed
    read-only, and an :class:`AdmissionRequest` is constructed once per
    network service and re-sent verbatim on every retry.
"""

import itertools
import threading
from typing import Any, Dict, NamedTuple, Optional, Tuple


# This is the version of the on-the-wire protocol implemented here,
# identified by a single byte.

version = b'a'


class Interface(NamedTuple):
    """ A typed interface exposed by a channel, or requested by a client.
        The *preference* is passed through to the broker uninterpreted.
    """

    type: str
    preference: str = ''


class Channel(NamedTuple):
    name: str
    namespace: str = ''
    interfaces: Tuple[Interface, ...] = ()


class ServiceDescriptor(NamedTuple):
    """ One network service as advertised by the broker, with the channels
        it can be reached through.
    """

    name: str
    namespace: str = ''
    channels: Tuple[Channel, ...] = ()


class DesiredService(NamedTuple):
    """ A network service this process wants a connection to, and the
        interfaces it wants on that connection.
    """

    name: str
    interfaces: Tuple[Interface, ...] = ()


class Identity(NamedTuple):
    name: str
    namespace: str


class AdmissionRequest(NamedTuple):
    """ The request for a data-plane connection to *service_name*. The
        *request_id* is an idempotency token: the broker uses it to recognize
        retries of the same logical request, so it must not change between
        attempts. *netns* is the handle the broker uses to locate the
        requester's network namespace.
    """

    request_id: str
    requester: Identity
    service_name: str
    netns: str
    interfaces: Tuple[Interface, ...] = ()


class AdmissionResult(NamedTuple):
    """ The broker's answer to an :class:`AdmissionRequest`. The
        *parameters* are opaque and only present when *accepted* is True;
        *admission_error* is an optional diagnostic string.
    """

    accepted: bool
    parameters: Optional[Dict[str, Any]] = None
    admission_error: str = ''


class Request:
    """ A single call to the broker: the operation name, the JSON-ready
        *payload*, and an identification number used to tie the response
        back to this request. A new :class:`Request` is created for every
        attempt; the identification number is a transport detail and has
        nothing to do with the admission request id.
    """

    def __init__(self, op, payload=None, id=None):

        if id is None:
            id = _id_next()

        self.id = id
        self.op = op
        self.payload = payload


    def __repr__(self):
        return 'Request(%s, %s)' % (self.op, self.id.decode())


# end of class Request


_id_min = 0
_id_max = 0xFFFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def _id_next():
    """ Return the next request identification number for subroutines to
        use when constructing a message.
    """

    global _id_ticker

    with _id_lock:
        id = next(_id_ticker)

        if id >= _id_max:
            _id_ticker = itertools.count(_id_min)

    id = '%08x' % (id)
    id = id.encode()
    return id


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
