"""Client configuration, read from ``ESP32_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .endpoint import Endpoint, TRANSPORT_TCP
from .protocol.codec import MAX_MESSAGE_SIZE

DEFAULT_PORT = 4242
ENV_PREFIX = "ESP32_"


@dataclass(slots=True)
class ClientConfig:
    transport: str = TRANSPORT_TCP
    ipv4: Optional[str] = None
    port: int = DEFAULT_PORT
    timeout: Optional[float] = None
    max_response_size: int = MAX_MESSAGE_SIZE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
        """Build a config from the environment.

        Raises:
            ValueError: If a numeric variable does not parse.
        """
        env = os.environ if environ is None else environ
        config = cls()

        config.transport = env.get(f"{ENV_PREFIX}TRANSPORT", config.transport).lower()
        config.ipv4 = env.get(f"{ENV_PREFIX}IPV4") or None
        config.port = _parse_number(env, "PORT", int, config.port)
        config.timeout = _parse_number(env, "TIMEOUT", float, config.timeout)
        config.max_response_size = _parse_number(
            env, "MAX_RESPONSE_SIZE", int, config.max_response_size
        )
        config.log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", config.log_level).upper()
        return config

    def endpoint(self) -> Endpoint:
        """Validated endpoint for this config.

        Raises:
            EndpointError: If the transport or address is invalid.
        """
        return Endpoint(self.transport, self.ipv4, self.port)


def _parse_number(env: Mapping[str, str], name: str, kind, default):
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e
