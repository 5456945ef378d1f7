"""Tests for the protobuf schema and the request/response codec."""

import pytest

from esp32_zephyr_mcp.errors import DecodeError, EncodeError
from esp32_zephyr_mcp.protocol import schema
from esp32_zephyr_mcp.protocol.codec import (
    decode_request,
    decode_response,
    encode_request,
    encode_response,
    payload_variant,
)
from esp32_zephyr_mcp.protocol.schema import CommandId, RetCode

from fake_device import make_response


def test_command_enum_values():
    """Command identifiers match the firmware's numbering."""
    assert CommandId.VERSION_GET == 0
    assert CommandId.ADC_CHS_GET == 1
    assert CommandId.ADC_CH_READ == 2
    assert CommandId.PWM_CHS_GET == 3
    assert CommandId.PWM_CH_SET == 4
    assert CommandId.PWM_CH_GET == 5
    assert CommandId.PWM_PERIOD_INTERVAL_GET == 6
    assert RetCode.OK == 0


def test_schema_enums_match_python_enums():
    """The descriptor enums are generated from the IntEnums."""
    desc = schema.ReqHdr.DESCRIPTOR.fields_by_name["id"].enum_type
    assert {v.name: v.number for v in desc.values} == {m.name: m.value for m in CommandId}


def test_minimal_response_bytes():
    """An OK header with no payload is field 1 holding ret=0."""
    data = encode_response(make_response())
    assert data == b"\x0a\x02\x08\x00"


def test_request_without_header_fails_to_encode():
    """The command identifier is mandatory."""
    request = schema.Request()
    request.version_get.SetInParent()
    with pytest.raises(EncodeError):
        encode_request(request)


def test_request_round_trip():
    """A request survives encode and decode with its variant intact."""
    request = schema.Request()
    request.hdr.id = CommandId.PWM_CH_SET
    request.pwm_ch_set.ch = 2
    request.pwm_ch_set.period = 20000
    request.pwm_ch_set.pulse = 1500

    decoded = decode_request(encode_request(request))
    assert decoded == request
    assert payload_variant(decoded) == "pwm_ch_set"


def test_response_round_trip():
    """A response with a payload decodes to an equal envelope."""
    response = make_response("pwm_ch_get", ch=0, period=1000, pulse=500)
    decoded = decode_response(encode_response(response))
    assert decoded == response
    assert payload_variant(decoded) == "pwm_ch_get"
    assert decoded.pwm_ch_get.period == 1000


def test_error_response_round_trip():
    """Status code and message text survive decoding."""
    response = make_response(ret=RetCode.ERR_INVALID_ARG, err_msg="bad channel")
    decoded = decode_response(encode_response(response))
    assert decoded.hdr.ret == RetCode.ERR_INVALID_ARG
    assert decoded.hdr.err_msg == "bad channel"
    assert payload_variant(decoded) is None


def test_empty_payload_variant_is_encoded():
    """Variants without fields are still visible on the wire."""
    request = schema.Request()
    request.hdr.id = CommandId.VERSION_GET
    request.version_get.SetInParent()
    assert payload_variant(decode_request(encode_request(request))) == "version_get"


@pytest.mark.parametrize("length", range(4))
def test_decode_rejects_prefix_of_minimal_envelope(length):
    """Anything shorter than the smallest valid response fails to decode."""
    data = encode_response(make_response())[:length]
    with pytest.raises(DecodeError):
        decode_response(data)


def test_decode_rejects_cut_inside_payload():
    """A response cut in the middle of its payload fails to decode."""
    data = encode_response(make_response("version_get", version="v1.2.3-zephyr"))
    with pytest.raises(DecodeError):
        decode_response(data[:-3])


def test_decode_rejects_missing_header():
    """A payload without the response header is not a valid envelope."""
    data = b"\x3a\x02\x08\x01"  # pwm_ch_get { ch: 1 }, no hdr
    with pytest.raises(DecodeError):
        decode_response(data)


def test_decode_rejects_garbage():
    """Bytes that are not protobuf at all fail to decode."""
    with pytest.raises(DecodeError):
        decode_response(b"\xff\xff\xff\xff\xff")


def test_decode_error_phase():
    """Decode errors report the decode phase."""
    with pytest.raises(DecodeError) as excinfo:
        decode_response(b"")
    assert excinfo.value.phase == "decode"


def test_decode_rejects_invalid_utf8_string():
    """String fields must hold UTF-8 text."""
    data = b"\x0a\x02\x08\x00" + b"\x12\x04\x0a\x02\xff\xfe"  # version_get { version: ff fe }
    with pytest.raises(DecodeError):
        decode_response(data)


def test_unknown_status_code_decodes():
    """The status code is a plain integer on the wire."""
    decoded = decode_response(b"\x0a\x02\x08\x07")
    assert decoded.hdr.ret == 7
