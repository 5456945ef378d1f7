"""Transport layer: one socket session per command exchange."""

from .socket_session import SocketSession, exchange
