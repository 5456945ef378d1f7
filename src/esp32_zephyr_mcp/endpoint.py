"""Device endpoint: transport kind, IPv4 address and destination port."""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass

from .errors import EndpointError

TRANSPORT_TCP = "tcp"
TRANSPORT_UDP = "udp"

SOCKET_TYPES: dict[str, int] = {
    TRANSPORT_TCP: socket.SOCK_STREAM,
    TRANSPORT_UDP: socket.SOCK_DGRAM,
}


@dataclass(frozen=True)
class Endpoint:
    """Immutable address of a device.

    Construction validates every field and raises :class:`EndpointError`
    instead of returning a partially valid object. No network access
    happens here.
    """

    transport: str
    ipv4: str
    port: int

    def __post_init__(self) -> None:
        if self.transport not in SOCKET_TYPES:
            raise EndpointError(
                f"Invalid transport type {self.transport!r}. "
                f"Valid: {list(SOCKET_TYPES)}"
            )
        if not isinstance(self.ipv4, str):
            raise EndpointError(f"Invalid IPv4 address {self.ipv4!r}")
        try:
            ipaddress.IPv4Address(self.ipv4)
        except ValueError as e:
            raise EndpointError(f"Invalid IPv4 address {self.ipv4!r}") from e
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise EndpointError(f"Port must be an integer, got {self.port!r}")
        if not 0 <= self.port <= 0xFFFF:
            raise EndpointError(f"Port must be 0-65535, got {self.port}")

    @property
    def address(self) -> tuple[str, int]:
        return (self.ipv4, self.port)

    @property
    def socket_type(self) -> int:
        return SOCKET_TYPES[self.transport]

    @property
    def is_stream(self) -> bool:
        return self.transport == TRANSPORT_TCP

    def to_dict(self) -> dict:
        return {"transport": self.transport, "ipv4": self.ipv4, "port": self.port}

    def __str__(self) -> str:
        return f"Transport: {self.transport}, IPv4: {self.ipv4}, Port: {self.port}"
