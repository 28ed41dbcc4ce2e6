""" The broker protocol: the value types exchanged with the broker, the
    closed set of status codes it reports, and the JSON/multipart mapping
    used on the wire. Nothing here depends on a transport.
"""

from . import fields
from . import message
from . import wire

from .fields import StatusCode
from .message import (
    AdmissionRequest,
    AdmissionResult,
    Channel,
    DesiredService,
    Identity,
    Interface,
    ServiceDescriptor,
)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
