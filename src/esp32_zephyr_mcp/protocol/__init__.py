"""Protocol layer: protobuf schema, codec, command descriptors, and result parsing."""

from .codec import decode_response, encode_request, MAX_MESSAGE_SIZE
from .commands import CAPABILITIES, Capability, build_request
from .schema import CommandId, RetCode
