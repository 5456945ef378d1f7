"""Protobuf message definitions shared with the device firmware.

The schema mirrors the firmware's ``cmds.proto`` (proto2)::

    Request  { required ReqHdr hdr = 1; oneof pl { <variant>Req ... } }
    Response { required ResHdr hdr = 1; oneof pl { <variant>Res ... } }

    ReqHdr   { required CommandId id = 1; }
    ResHdr   { required uint32 ret = 1; optional string err_msg = 2; }

The descriptors are assembled here with ``descriptor_pb2`` and loaded into a
private descriptor pool, so no ``protoc`` step is needed at install time.
"""

from __future__ import annotations

from enum import IntEnum

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "esp32_zephyr.cmds"
PAYLOAD_ONEOF = "pl"

_F = descriptor_pb2.FieldDescriptorProto
_UINT32 = _F.TYPE_UINT32
_INT32 = _F.TYPE_INT32
_STRING = _F.TYPE_STRING


class CommandId(IntEnum):
    """Command identifiers, one per device capability."""

    VERSION_GET = 0
    ADC_CHS_GET = 1
    ADC_CH_READ = 2
    PWM_CHS_GET = 3
    PWM_CH_SET = 4
    PWM_CH_GET = 5
    PWM_PERIOD_INTERVAL_GET = 6


class RetCode(IntEnum):
    """Known status codes. On the wire ``ret`` is a plain uint32, so the
    device may report failure codes not listed here."""

    OK = 0
    ERR = 1
    ERR_INVALID_ARG = 2
    ERR_NOT_SUPPORTED = 3


# Payload message name -> [(field name, number, type)]
PAYLOAD_MESSAGES: dict[str, list[tuple[str, int, int]]] = {
    "VersionGetReq": [],
    "VersionGetRes": [("version", 1, _STRING)],
    "AdcChsGetReq": [],
    "AdcChsGetRes": [("chs", 1, _UINT32)],
    "AdcChReadReq": [("ch", 1, _UINT32)],
    "AdcChReadRes": [("ch", 1, _UINT32), ("val", 2, _INT32)],
    "PwmChsGetReq": [],
    "PwmChsGetRes": [("chs", 1, _UINT32)],
    "PwmChSetReq": [("ch", 1, _UINT32), ("period", 2, _UINT32), ("pulse", 3, _UINT32)],
    "PwmChSetRes": [("ch", 1, _UINT32), ("period", 2, _UINT32), ("pulse", 3, _UINT32)],
    "PwmChGetReq": [("ch", 1, _UINT32)],
    "PwmChGetRes": [("ch", 1, _UINT32), ("period", 2, _UINT32), ("pulse", 3, _UINT32)],
    "PwmPeriodsGetReq": [],
    "PwmPeriodsGetRes": [("period_min", 1, _UINT32), ("period_max", 2, _UINT32)],
}

# Oneof member name -> (field number, request message, response message)
PAYLOAD_VARIANTS: dict[str, tuple[int, str, str]] = {
    "version_get": (2, "VersionGetReq", "VersionGetRes"),
    "adc_chs_get": (3, "AdcChsGetReq", "AdcChsGetRes"),
    "adc_ch_read": (4, "AdcChReadReq", "AdcChReadRes"),
    "pwm_chs_get": (5, "PwmChsGetReq", "PwmChsGetRes"),
    "pwm_ch_set": (6, "PwmChSetReq", "PwmChSetRes"),
    "pwm_ch_get": (7, "PwmChGetReq", "PwmChGetRes"),
    "pwm_periods_get": (8, "PwmPeriodsGetReq", "PwmPeriodsGetRes"),
}


def _type_name(name: str) -> str:
    return f".{PACKAGE}.{name}"


def _add_enum(proto: descriptor_pb2.FileDescriptorProto, enum: type[IntEnum]) -> None:
    enum_proto = proto.enum_type.add(name=enum.__name__)
    for member in enum:
        enum_proto.value.add(name=member.name, number=member.value)


def _add_envelope(
    proto: descriptor_pb2.FileDescriptorProto,
    name: str,
    header: str,
    side: int,
) -> None:
    """Add a Request/Response envelope: required header + payload oneof."""
    msg = proto.message_type.add(name=name)
    msg.oneof_decl.add(name=PAYLOAD_ONEOF)
    msg.field.add(
        name="hdr",
        number=1,
        label=_F.LABEL_REQUIRED,
        type=_F.TYPE_MESSAGE,
        type_name=_type_name(header),
    )
    for variant, layout in PAYLOAD_VARIANTS.items():
        msg.field.add(
            name=variant,
            number=layout[0],
            label=_F.LABEL_OPTIONAL,
            type=_F.TYPE_MESSAGE,
            type_name=_type_name(layout[side]),
            oneof_index=0,
        )


def build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    """Assemble the ``cmds.proto`` file descriptor."""
    proto = descriptor_pb2.FileDescriptorProto(
        name="esp32_zephyr/cmds.proto",
        package=PACKAGE,
        syntax="proto2",
    )
    _add_enum(proto, CommandId)

    for msg_name, fields in PAYLOAD_MESSAGES.items():
        msg = proto.message_type.add(name=msg_name)
        for field_name, number, field_type in fields:
            msg.field.add(
                name=field_name,
                number=number,
                label=_F.LABEL_OPTIONAL,
                type=field_type,
            )

    hdr = proto.message_type.add(name="ReqHdr")
    hdr.field.add(
        name="id",
        number=1,
        label=_F.LABEL_REQUIRED,
        type=_F.TYPE_ENUM,
        type_name=_type_name("CommandId"),
    )

    hdr = proto.message_type.add(name="ResHdr")
    hdr.field.add(
        name="ret",
        number=1,
        label=_F.LABEL_REQUIRED,
        type=_UINT32,
    )
    hdr.field.add(name="err_msg", number=2, label=_F.LABEL_OPTIONAL, type=_STRING)

    _add_envelope(proto, "Request", "ReqHdr", side=1)
    _add_envelope(proto, "Response", "ResHdr", side=2)
    return proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(build_file_descriptor().SerializeToString())


def message_class(name: str):
    """Return the generated message class for a schema message name."""
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{PACKAGE}.{name}")
    )


Request = message_class("Request")
Response = message_class("Response")
ReqHdr = message_class("ReqHdr")
ResHdr = message_class("ResHdr")
