"""ZeroMQ request/response client for the local broker.

The broker listens on a ROUTER socket bound to a local ``ipc://`` endpoint;
this client connects a DEALER socket to it. Calls are strictly sequential,
one outstanding request at a time, so no background thread is involved:
each call sends its frames and then polls for the matching response.
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from typing import Any, Dict, List, Optional

import zmq

from ...errors import BrokerError
from ...protocol import wire
from ...protocol.fields import StatusCode
from ...protocol.message import AdmissionRequest, AdmissionResult, Request, ServiceDescriptor
from ..base import BrokerClient, TransportConnectionError


logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


def endpoint(socket_path: str) -> str:
    """Return the ZeroMQ endpoint for a local socket path."""

    if '://' in socket_path:
        return socket_path
    return 'ipc://' + socket_path


class Client(BrokerClient):
    """ Issue requests via a ZeroMQ DEALER socket and receive responses.
        Maintains a persistent connection to the broker listening on
        *socket_path*; the path must exist when the client is created.

        Responses that arrive after their request has been abandoned (because
        a previous call timed out) are discarded by identification number.
    """

    timeout = 5.0

    def __init__(self, socket_path: str, timeout: Optional[float] = None):

        if timeout is not None:
            self.timeout = float(timeout)

        if '://' not in socket_path and not os.path.exists(socket_path):
            raise TransportConnectionError("broker socket not found: " + socket_path)

        self.socket_path = socket_path
        self.server = endpoint(socket_path)

        identity = f"nsminit.Client.{os.getpid()}.{id(self)}".encode()

        self.socket = zmq_context.socket(zmq.DEALER)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.identity = identity
        self.socket_lock = threading.Lock()

        try:
            self.socket.connect(self.server)
        except zmq.ZMQError as exc:
            self.socket.close()
            raise TransportConnectionError(f"cannot connect to {self.server}: {exc}") from exc

        logger.debug("connected to broker at %s", self.server)


    def _call(self, request: Request, timeout: Optional[float]) -> Optional[Dict[str, Any]]:
        """ Send one request and block for its response. The effective
            timeout is the smaller of *timeout* and the client default.
        """

        if timeout is None or timeout > self.timeout:
            timeout = self.timeout

        frames = wire.to_request_frames(request)

        with self.socket_lock:
            if self.socket is None:
                raise TransportConnectionError('client is closed')

            try:
                self.socket.send_multipart(frames)
            except zmq.ZMQError as exc:
                raise TransportConnectionError(f"{request.op} @ {self.server}: {exc}") from exc

            poller = zmq.Poller()
            poller.register(self.socket, zmq.POLLIN)

            remaining = timeout
            deadline = _now() + timeout

            while remaining > 0:
                sockets = dict(poller.poll(remaining * 1000))

                if self.socket in sockets:
                    parts = self.socket.recv_multipart()
                    try:
                        response_id, payload = wire.from_response_frames(parts)
                    except ValueError as exc:
                        logger.warning("discarding malformed response from broker: %s", exc)
                        response_id = None

                    if response_id == request.id:
                        return payload

                    if response_id is not None:
                        logger.debug("discarding stale response %s", response_id)

                remaining = deadline - _now()

        raise BrokerError(StatusCode.OTHER, f"{request.op}: no response received in {timeout:.2f} sec")


    def discover(self, timeout: Optional[float] = None) -> List[ServiceDescriptor]:
        payload = self._call(wire.discover_request(), timeout)
        return wire.services_from_response(payload)


    def request_admission(self, request: AdmissionRequest, timeout: Optional[float] = None) -> AdmissionResult:
        payload = self._call(wire.connect_request(request), timeout)
        return wire.result_from_response(payload)


    def close(self) -> None:
        with self.socket_lock:
            if self.socket is not None:
                self.socket.close()
                self.socket = None


# end of class Client



def _now() -> float:
    return time.monotonic()


def _cleanup() -> None:
    try:
        zmq_context.destroy(linger=0)
    except zmq.ZMQError:
        pass


atexit.register(_cleanup)
