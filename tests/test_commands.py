"""Tests for command descriptors and request building."""

import pytest

from esp32_zephyr_mcp.errors import EncodeError
from esp32_zephyr_mcp.protocol.codec import decode_request, encode_request, payload_variant
from esp32_zephyr_mcp.protocol.commands import CAPABILITIES, build_request
from esp32_zephyr_mcp.protocol.parser import PwmChannelResponse, parse_payload
from esp32_zephyr_mcp.protocol.schema import CommandId, PAYLOAD_VARIANTS

from fake_device import make_response


def test_every_command_has_a_capability():
    """Each command identifier maps to one descriptor and payload variant."""
    assert set(CAPABILITIES) == set(CommandId)
    variants = [cap.variant for cap in CAPABILITIES.values()]
    assert len(set(variants)) == len(variants)
    assert set(variants) == set(PAYLOAD_VARIANTS)


@pytest.mark.parametrize(
    "command, args",
    [
        (CommandId.VERSION_GET, {}),
        (CommandId.ADC_CHS_GET, {}),
        (CommandId.ADC_CH_READ, {"ch": 1}),
        (CommandId.PWM_CHS_GET, {}),
        (CommandId.PWM_CH_SET, {"ch": 0, "period": 1000, "pulse": 500}),
        (CommandId.PWM_CH_GET, {"ch": 3}),
        (CommandId.PWM_PERIOD_INTERVAL_GET, {}),
    ],
)
def test_build_request(command, args):
    """Header id and payload variant follow the command identifier."""
    request = decode_request(encode_request(build_request(command, **args)))
    assert request.hdr.id == command
    assert payload_variant(request) == CAPABILITIES[command].variant
    payload = getattr(request, CAPABILITIES[command].variant)
    for name, value in args.items():
        assert getattr(payload, name) == value


def test_build_adc_read_payload():
    """ADC read embeds the channel index."""
    request = build_request(CommandId.ADC_CH_READ, ch=1)
    assert request.adc_ch_read.ch == 1


def test_missing_argument():
    """Every payload argument must be supplied."""
    with pytest.raises(EncodeError):
        build_request(CommandId.PWM_CH_SET, ch=0, period=1000)


def test_unknown_argument():
    """Arguments the payload does not define are rejected."""
    with pytest.raises(EncodeError):
        build_request(CommandId.VERSION_GET, ch=0)


@pytest.mark.parametrize("ch", [-1, 2**32])
def test_argument_out_of_type_range(ch):
    """Values a uint32 cannot hold fail as encode errors."""
    with pytest.raises(EncodeError):
        build_request(CommandId.PWM_CH_GET, ch=ch)


def test_argument_wrong_type():
    """Non-integer arguments fail as encode errors."""
    with pytest.raises(EncodeError):
        build_request(CommandId.ADC_CH_READ, ch="1")


def test_parse_payload():
    """Result dataclasses copy the matching payload fields."""
    response = make_response("pwm_ch_get", ch=0, period=1000, pulse=500)
    result = parse_payload(PwmChannelResponse, response.pwm_ch_get)
    assert result == PwmChannelResponse(ch=0, period=1000, pulse=500)
    assert result.to_dict() == {"ch": 0, "period": 1000, "pulse": 500}
