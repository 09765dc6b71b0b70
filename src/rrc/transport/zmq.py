"""ZeroMQ transport.

The robot binds a REP socket for the command channel and a PUB socket for
telemetry; a controller connects a REQ socket and a SUB socket. One frame
is one ZeroMQ message, there is no multipart framing.

The REP/REQ pairing enforces the request/acknowledgement pattern on the
wire: the robot must answer every request before it can receive the next
one, which is exactly what the dispatcher does.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import zmq

from .base import Transport, TransportConnectionError, TransportTimeout


logger = logging.getLogger(__name__)

zmq_context = zmq.Context.instance()


class ZmqTransport(Transport):
    """Wrap a single ZeroMQ socket of *socket_type*.

    The socket binds to *address* if *bind* is True, otherwise it connects.
    A lock serializes sends, ZeroMQ sockets are not thread-safe.
    """

    def __init__(self, socket_type: int, address: str, bind: bool = False, context: Optional[zmq.Context] = None):
        if context is None:
            context = zmq_context

        self.address = address
        self.socket = context.socket(socket_type)
        self.socket.setsockopt(zmq.LINGER, 0)

        if socket_type == zmq.SUB:
            self.socket.setsockopt(zmq.SUBSCRIBE, b"")

        try:
            if bind:
                self.socket.bind(address)
            else:
                self.socket.connect(address)
        except zmq.ZMQError as e:
            self.socket.close()
            raise TransportConnectionError(f"{address}: {e}") from e

        self.socket_lock = threading.Lock()
        self.closed = False

    def __repr__(self) -> str:
        return f"ZmqTransport({self.socket.type!r}, {self.address!r})"

    def send(self, data: bytes) -> int:
        """Best effort: a failed send is logged and reported as 0 bytes."""

        with self.socket_lock:
            try:
                self.socket.send(data, copy=True)
            except zmq.ZMQError as e:
                logger.warning("send on %s failed: %s", self.address, e)
                return 0

        return len(data)

    def receive(self, block: bool = False, timeout: Optional[float] = None) -> Optional[bytes]:
        """Return the next message, or None if *block* is False and nothing
        is waiting. With *block* and a *timeout* in seconds, raise
        :class:`TransportTimeout` when nothing arrives in time.
        """

        if not block:
            try:
                return self.socket.recv(flags=zmq.NOBLOCK)
            except zmq.Again:
                return None

        if timeout is not None:
            if self.socket.poll(int(timeout * 1000), zmq.POLLIN) == 0:
                raise TransportTimeout(f"{self.address}: nothing received in {timeout:.2f} sec")

        return self.socket.recv()

    def close(self) -> None:
        if self.closed:
            return

        self.closed = True
        self.socket.close()


def command_server(address: str, context: Optional[zmq.Context] = None) -> ZmqTransport:
    """Robot side of the command channel."""
    return ZmqTransport(zmq.REP, address, bind=True, context=context)


def telemetry_publisher(address: str, context: Optional[zmq.Context] = None) -> ZmqTransport:
    """Robot side of the telemetry channel."""
    return ZmqTransport(zmq.PUB, address, bind=True, context=context)


def command_client(address: str, context: Optional[zmq.Context] = None) -> ZmqTransport:
    """Controller side of the command channel."""
    return ZmqTransport(zmq.REQ, address, bind=False, context=context)


def telemetry_subscriber(address: str, context: Optional[zmq.Context] = None) -> ZmqTransport:
    """Controller side of the telemetry channel."""
    return ZmqTransport(zmq.SUB, address, bind=False, context=context)
