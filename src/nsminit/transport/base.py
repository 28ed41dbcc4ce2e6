"""Broker client interface.

This is the (small) contract that broker client implementations should
follow. It lives outside :mod:`nsminit.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..errors import InitError
from ..protocol.message import AdmissionRequest, AdmissionResult, ServiceDescriptor


# Transport agnostic exceptions

class TransportError(InitError):
    """The broker endpoint cannot be reached. Never retried."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class BrokerClient(ABC):
    """ Minimal contract for talking to the broker. Both calls either return
        a result or raise :class:`nsminit.errors.BrokerError` carrying a
        status code; a :class:`TransportError` means the endpoint itself is
        unusable. The optional *timeout* bounds how long a single call may
        block, in seconds.
    """

    @abstractmethod
    def discover(self, timeout: Optional[float] = None) -> List[ServiceDescriptor]:
        """Return the network services known to the broker."""

    @abstractmethod
    def request_admission(self, request: AdmissionRequest, timeout: Optional[float] = None) -> AdmissionResult:
        """Ask the broker to admit a connection for *request*."""

    def close(self) -> None:
        """Release the underlying connection, if any."""
