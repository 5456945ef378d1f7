"""Typed results extracted from response payload variants."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields


@dataclass
class VersionResponse:
    """Firmware version reported by VERSION_GET."""

    version: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AdcChannelsResponse:
    """Number of ADC channels reported by ADC_CHS_GET."""

    chs: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AdcReadResponse:
    """Raw sample from ADC_CH_READ."""

    ch: int
    val: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PwmChannelsResponse:
    """Number of PWM channels reported by PWM_CHS_GET."""

    chs: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PwmChannelResponse:
    """PWM channel state, returned by PWM_CH_GET and echoed by PWM_CH_SET."""

    ch: int
    period: int
    pulse: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PwmPeriodIntervalResponse:
    """Supported PWM period range from PWM_PERIOD_INTERVAL_GET."""

    period_min: int
    period_max: int

    def to_dict(self) -> dict:
        return asdict(self)


def parse_payload(result_type: type, payload):
    """Copy the fields of a payload message into a result dataclass.

    Dataclass field names match the schema field names one to one.
    """
    return result_type(**{f.name: getattr(payload, f.name) for f in fields(result_type)})
