"""Client and MCP server for the ESP32 Zephyr peripheral command protocol."""

from .client import Esp32Client
from .endpoint import Endpoint
from .errors import (
    Esp32Error,
    EndpointError,
    EncodeError,
    TransportError,
    PeerClosedError,
    DecodeError,
    CommandError,
    ResponseShapeError,
)

__version__ = "0.1.0"
