"""One-shot socket session to the device.

A session opens a fresh TCP connection (or a connected UDP socket, which
only binds an ephemeral local port and records the peer), writes one
request, reads one response and closes. Sessions are never pooled.

Usage::

    with SocketSession(endpoint) as session:
        session.write(request_bytes)
        response = session.read()
"""

from __future__ import annotations

import logging
import socket

from ..endpoint import Endpoint
from ..errors import PeerClosedError, TransportError
from ..protocol.codec import MAX_MESSAGE_SIZE

logger = logging.getLogger(__name__)


class SocketSession:
    """Scoped socket to a single :class:`Endpoint`.

    ``timeout`` is an optional caller-imposed limit in seconds applied to
    connect, write and read; ``None`` blocks indefinitely.
    """

    def __init__(self, endpoint: Endpoint, timeout: float | None = None) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._sock: socket.socket | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def open(self) -> None:
        """Create the socket and connect it to the endpoint.

        Raises:
            TransportError: If the socket cannot be created or connected.
                The socket is released before raising.
        """
        if self._sock is not None:
            return

        addr = self._endpoint.address
        try:
            sock = socket.socket(socket.AF_INET, self._endpoint.socket_type)
        except OSError as e:
            raise TransportError(f"socket: {e}") from e

        try:
            if self._timeout is not None:
                sock.settimeout(self._timeout)
            sock.connect(addr)
        except OSError as e:
            sock.close()
            raise TransportError(
                f"dial {self._endpoint.transport} {addr[0]}:{addr[1]}: {e}"
            ) from e

        self._sock = sock
        logger.debug("Opened %s session to %s:%d", self._endpoint.transport, *addr)

    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        if self._sock is None:
            return
        try:
            self._sock.close()
        finally:
            self._sock = None
            logger.debug("Closed session to %s:%d", *self._endpoint.address)

    def write(self, data: bytes) -> None:
        """Send one encoded request in a single logical write.

        Raises:
            TransportError: If not connected or the send fails.
        """
        if self._sock is None:
            raise TransportError("write: session is not open")
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise TransportError(f"write: {e}") from e
        logger.debug("Wrote %d bytes", len(data))

    def read(self, max_size: int = MAX_MESSAGE_SIZE) -> bytes:
        """Receive one response of at most ``max_size`` bytes.

        Raises:
            PeerClosedError: On a stream transport when the device closes
                the connection without sending anything.
            TransportError: If not connected or the receive fails.
        """
        if self._sock is None:
            raise TransportError("read: session is not open")
        try:
            data = self._sock.recv(max_size)
        except OSError as e:
            raise TransportError(f"read: {e}") from e

        if not data and self._endpoint.is_stream:
            raise PeerClosedError("read: connection closed by peer")
        if len(data) >= max_size:
            logger.warning(
                "Response filled the %d-byte receive buffer and may be truncated",
                max_size,
            )
        logger.debug("Read %d bytes", len(data))
        return data

    def __enter__(self) -> SocketSession:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def exchange(
    endpoint: Endpoint,
    data: bytes,
    max_size: int = MAX_MESSAGE_SIZE,
    timeout: float | None = None,
) -> bytes:
    """Open a session, write ``data``, read one response and close."""
    with SocketSession(endpoint, timeout=timeout) as session:
        session.write(data)
        return session.read(max_size)
