"""MCP server entry point for ESP32 Zephyr devices.

Exposes the device capabilities as tools via the Model Context Protocol
using the official Python MCP SDK with stdio transport. Every tool runs a
single command exchange; no connection is kept open between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP

from .client import Esp32Client
from .config import ClientConfig
from .endpoint import Endpoint
from .errors import CommandError, EndpointError, Esp32Error

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "esp32-zephyr",
    instructions="MCP server for ESP32 Zephyr peripheral access (version, ADC, PWM)",
)

# Client for the configured endpoint
_client: Esp32Client | None = None
_config = ClientConfig()


def _get_client() -> Esp32Client:
    """Get the configured client, raising if no endpoint is set."""
    if _client is None:
        raise RuntimeError(
            "No device endpoint configured. Use the 'configure' tool first."
        )
    return _client


def _error(e: Esp32Error) -> dict[str, Any]:
    result: dict[str, Any] = {"error": str(e), "phase": e.phase}
    if isinstance(e, CommandError):
        result["ret"] = int(e.ret)
        result["err_msg"] = e.err_msg
    return result


def _use_endpoint(endpoint: Endpoint) -> dict[str, Any]:
    global _client
    _client = Esp32Client.from_endpoint(
        endpoint,
        timeout=_config.timeout,
        max_response_size=_config.max_response_size,
    )
    logger.info("Endpoint configured: %s", endpoint)
    return {"configured": True, **endpoint.to_dict()}


def _run(call: Callable[[Esp32Client], Any]) -> dict[str, Any]:
    client = _get_client()
    try:
        result = call(client)
    except Esp32Error as e:
        logger.warning("Command to %s failed: %s", client.endpoint, e)
        return _error(e)
    return result.to_dict()


# ─── ENDPOINT TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def configure(transport: str = "tcp", ipv4: str = "", port: int = 4242) -> dict[str, Any]:
    """Set the device endpoint used by all other tools.

    Validates the transport kind and IPv4 address; no network access
    happens until a command tool is called.

    Args:
        transport: "tcp" or "udp".
        ipv4: Device IPv4 address, e.g. "192.168.0.12".
        port: Device command port (default 4242).
    """
    try:
        endpoint = Endpoint(transport, ipv4, port)
    except Esp32Error as e:
        return _error(e)
    return _use_endpoint(endpoint)


@mcp.tool()
def get_endpoint_info() -> dict[str, Any]:
    """Show the configured transport, address and port."""
    if _client is None:
        return {"configured": False}
    return {"configured": True, **_client.endpoint.to_dict()}


# ─── DEVICE TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def version_get() -> dict[str, Any]:
    """Read the device firmware version."""
    return _run(lambda c: c.version_get())


@mcp.tool()
def adc_chs_get() -> dict[str, Any]:
    """Get the number of ADC channels on the device."""
    return _run(lambda c: c.adc_chs_get())


@mcp.tool()
def adc_ch_read(ch: int) -> dict[str, Any]:
    """Read a raw sample from an ADC channel.

    Args:
        ch: ADC channel index.
    """
    return _run(lambda c: c.adc_ch_read(ch))


@mcp.tool()
def pwm_chs_get() -> dict[str, Any]:
    """Get the number of PWM channels on the device."""
    return _run(lambda c: c.pwm_chs_get())


@mcp.tool()
def pwm_ch_get(ch: int) -> dict[str, Any]:
    """Get period and pulse width of a PWM channel.

    Args:
        ch: PWM channel index.
    """
    return _run(lambda c: c.pwm_ch_get(ch))


@mcp.tool()
def pwm_ch_set(ch: int, period: int, pulse: int) -> dict[str, Any]:
    """Set period and pulse width of a PWM channel.

    Args:
        ch: PWM channel index.
        period: PWM period in device units.
        pulse: Pulse width in device units.
    """
    return _run(lambda c: c.pwm_ch_set(ch, period, pulse))


@mcp.tool()
def pwm_period_interval_get() -> dict[str, Any]:
    """Get the minimum and maximum PWM period the device supports."""
    return _run(lambda c: c.pwm_period_interval_get())


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main():
    """Run the MCP server with stdio transport."""
    global _config
    _config = ClientConfig.from_env()
    configure_logging(_config.log_level)

    if _config.ipv4:
        try:
            _use_endpoint(_config.endpoint())
        except EndpointError as e:
            logger.error("Ignoring ESP32_* endpoint settings: %s", e)

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
