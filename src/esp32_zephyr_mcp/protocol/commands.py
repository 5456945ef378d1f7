"""Command descriptors and the request envelope builder.

Every device capability follows the same pattern: a command identifier,
the oneof payload variant it selects in both envelopes, the argument
names its request payload takes, and the result type built from its
response payload. ``CAPABILITIES`` holds one descriptor per identifier.
"""

from __future__ import annotations

from dataclasses import dataclass

from google.protobuf.message import Message

from ..errors import EncodeError
from . import schema
from .parser import (
    AdcChannelsResponse,
    AdcReadResponse,
    PwmChannelResponse,
    PwmChannelsResponse,
    PwmPeriodIntervalResponse,
    VersionResponse,
)
from .schema import CommandId


@dataclass(frozen=True)
class Capability:
    """Binds a command identifier to its payload variant and result type."""

    command: CommandId
    variant: str
    result: type
    args: tuple[str, ...] = ()


CAPABILITIES: dict[CommandId, Capability] = {
    cap.command: cap
    for cap in (
        Capability(CommandId.VERSION_GET, "version_get", VersionResponse),
        Capability(CommandId.ADC_CHS_GET, "adc_chs_get", AdcChannelsResponse),
        Capability(CommandId.ADC_CH_READ, "adc_ch_read", AdcReadResponse, ("ch",)),
        Capability(CommandId.PWM_CHS_GET, "pwm_chs_get", PwmChannelsResponse),
        Capability(
            CommandId.PWM_CH_SET,
            "pwm_ch_set",
            PwmChannelResponse,
            ("ch", "period", "pulse"),
        ),
        Capability(CommandId.PWM_CH_GET, "pwm_ch_get", PwmChannelResponse, ("ch",)),
        Capability(
            CommandId.PWM_PERIOD_INTERVAL_GET,
            "pwm_periods_get",
            PwmPeriodIntervalResponse,
        ),
    )
}


def build_request(command: CommandId, **args: int) -> Message:
    """Build a ``Request`` envelope for a command.

    Args:
        command: Command identifier; selects the payload variant.
        **args: Request payload fields, e.g. ``ch=1``.

    Raises:
        EncodeError: On unknown or missing arguments, or values the
            payload field type cannot hold (e.g. a negative ``uint32``).
    """
    cap = CAPABILITIES[CommandId(command)]
    if set(args) != set(cap.args):
        raise EncodeError(
            f"{cap.command.name} takes arguments {list(cap.args)}, got {sorted(args)}"
        )

    request = schema.Request()
    request.hdr.id = cap.command
    payload = getattr(request, cap.variant)
    payload.SetInParent()
    for name, value in args.items():
        try:
            setattr(payload, name, value)
        except (TypeError, ValueError) as e:
            raise EncodeError(f"{cap.command.name}: invalid {name}={value!r}: {e}") from e
    return request
