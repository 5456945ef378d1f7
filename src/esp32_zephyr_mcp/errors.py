"""Exception hierarchy for the command exchange.

Every error carries a ``phase`` naming the step of the exchange that
failed, so callers can tell categories apart without string matching::

    construct -> encode -> transport -> decode -> validate
"""

from __future__ import annotations


class Esp32Error(Exception):
    """Base exception for all client errors."""

    phase = "unknown"


class EndpointError(Esp32Error, ValueError):
    """Invalid transport kind, address or port."""

    phase = "construct"


class EncodeError(Esp32Error):
    """The request envelope could not be serialized."""

    phase = "encode"


class TransportError(Esp32Error):
    """Connect, write or read on the socket failed."""

    phase = "transport"


class PeerClosedError(TransportError):
    """The device closed the stream before sending any response bytes."""


class DecodeError(Esp32Error):
    """Received bytes are truncated or do not match the schema."""

    phase = "decode"


class CommandError(Esp32Error):
    """The device answered with a non-success status code."""

    phase = "validate"

    def __init__(self, ret: int, err_msg: str = "") -> None:
        self.ret = ret
        self.err_msg = err_msg
        super().__init__(f"Command failed! (ret: {int(ret)}) {err_msg}".rstrip())


class ResponseShapeError(Esp32Error):
    """The response payload variant does not match the command sent."""

    phase = "validate"

    def __init__(self, expected: str, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid response: expected '{expected}' payload, "
            f"got {repr(actual) if actual else 'none'}"
        )
