"""ZeroMQ broker client."""

from .request import Client, endpoint
