"""Encode request envelopes and decode response envelopes.

One write carries exactly one serialized ``Request`` and one read is
expected to hold exactly one serialized ``Response``. Protobuf has no
length prefix, so the receive side is bounded by ``MAX_MESSAGE_SIZE``;
a response cut at that bound fails to decode instead of producing a
partial envelope.
"""

from __future__ import annotations

from google.protobuf import descriptor
from google.protobuf import message as protobuf_message
from google.protobuf.message import Message

from ..errors import DecodeError, EncodeError
from . import schema

MAX_MESSAGE_SIZE = 1024


def encode_request(request: Message) -> bytes:
    """Serialize a ``Request`` envelope.

    Raises:
        EncodeError: If the envelope is missing required fields.
    """
    try:
        return request.SerializeToString()
    except protobuf_message.EncodeError as e:
        raise EncodeError(f"encode request: {e}") from e


def _invalid_strings(msg: Message, prefix: str = "") -> list[str]:
    """Paths of string fields that did not decode as UTF-8."""
    invalid = []
    for field, value in msg.ListFields():
        path = f"{prefix}{field.name}"
        if field.type == descriptor.FieldDescriptor.TYPE_STRING:
            if not isinstance(value, str):
                invalid.append(path)
        elif field.type == descriptor.FieldDescriptor.TYPE_MESSAGE:
            invalid.extend(_invalid_strings(value, f"{path}."))
    return invalid


def _parse(message_type: type[Message], data: bytes, what: str) -> Message:
    msg = message_type()
    try:
        msg.ParseFromString(bytes(data))
    except (protobuf_message.DecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"unmarshal {what} ({len(data)} bytes): {e}") from e
    if not msg.IsInitialized():
        missing = ", ".join(msg.FindInitializationErrors())
        raise DecodeError(
            f"unmarshal {what} ({len(data)} bytes): missing required fields: {missing}"
        )
    invalid = _invalid_strings(msg)
    if invalid:
        raise DecodeError(
            f"unmarshal {what} ({len(data)} bytes): invalid UTF-8 in {', '.join(invalid)}"
        )
    return msg


def decode_response(data: bytes) -> Message:
    """Parse bytes received from the device into a ``Response`` envelope.

    Raises:
        DecodeError: If the bytes are truncated, malformed, lack the
            required header, or carry invalid UTF-8 in a string field.
    """
    return _parse(schema.Response, data, "response")


def encode_response(response: Message) -> bytes:
    """Serialize a ``Response`` envelope (device side, used by test doubles)."""
    try:
        return response.SerializeToString()
    except protobuf_message.EncodeError as e:
        raise EncodeError(f"encode response: {e}") from e


def decode_request(data: bytes) -> Message:
    """Parse a serialized ``Request`` envelope (device side)."""
    return _parse(schema.Request, data, "request")


def payload_variant(envelope: Message) -> str | None:
    """Name of the payload variant set on an envelope, or ``None``."""
    return envelope.WhichOneof(schema.PAYLOAD_ONEOF)
