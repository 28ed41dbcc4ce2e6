"""Broker client implementations."""

from .base import (
    BrokerClient,
    TransportError,
    TransportConnectionError,
)
