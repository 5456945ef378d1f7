"""High-level client for the ESP32 Zephyr command protocol.

Each call runs one exchange::

    encode request -> open socket -> write -> read -> close
        -> decode response -> check status -> extract payload variant

Nothing is retried and nothing is shared between calls, so concurrent
calls from different threads each use their own socket.
"""

from __future__ import annotations

import logging

from google.protobuf.message import Message

from .endpoint import Endpoint
from .errors import CommandError, ResponseShapeError
from .protocol.codec import (
    MAX_MESSAGE_SIZE,
    decode_response,
    encode_request,
    payload_variant,
)
from .protocol.commands import CAPABILITIES, build_request
from .protocol.parser import (
    AdcChannelsResponse,
    AdcReadResponse,
    PwmChannelResponse,
    PwmChannelsResponse,
    PwmPeriodIntervalResponse,
    VersionResponse,
    parse_payload,
)
from .protocol.schema import CommandId, RetCode
from .transport.socket_session import exchange

logger = logging.getLogger(__name__)


class Esp32Client:
    """Sends commands to one device endpoint.

    Args:
        transport: ``"tcp"`` or ``"udp"``.
        ipv4: Device IPv4 address.
        dest_port: Device port.
        timeout: Optional socket timeout in seconds. ``None`` blocks.
        max_response_size: Receive buffer bound for one response.

    Raises:
        EndpointError: If the transport kind or address is invalid.
    """

    def __init__(
        self,
        transport: str,
        ipv4: str,
        dest_port: int,
        timeout: float | None = None,
        max_response_size: int = MAX_MESSAGE_SIZE,
    ) -> None:
        self._endpoint = Endpoint(transport, ipv4, dest_port)
        self._timeout = timeout
        self._max_response_size = max_response_size

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint, **kwargs) -> Esp32Client:
        return cls(endpoint.transport, endpoint.ipv4, endpoint.port, **kwargs)

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    def send_cmd(self, request: Message) -> Message:
        """Run one exchange and return the decoded ``Response``.

        Raises:
            EncodeError, TransportError, DecodeError: From the failing phase.
            CommandError: If the device status is not ``OK``. The response
                payload is never exposed in this case.
        """
        req_bytes = encode_request(request)
        logger.debug(
            "Sending %s (%d bytes) to %s",
            CommandId(request.hdr.id).name,
            len(req_bytes),
            self._endpoint,
        )
        res_bytes = exchange(
            self._endpoint,
            req_bytes,
            max_size=self._max_response_size,
            timeout=self._timeout,
        )
        response = decode_response(res_bytes)

        hdr = response.hdr
        if hdr.ret != RetCode.OK:
            try:
                ret = RetCode(hdr.ret)
            except ValueError:
                ret = hdr.ret
            raise CommandError(ret, hdr.err_msg)
        return response

    def call(self, command: CommandId, **args: int):
        """Send a command and return its typed result.

        Raises:
            ResponseShapeError: If the response carries a payload variant
                other than the one ``command`` promises.
        """
        cap = CAPABILITIES[CommandId(command)]
        response = self.send_cmd(build_request(cap.command, **args))

        actual = payload_variant(response)
        if actual != cap.variant:
            raise ResponseShapeError(cap.variant, actual)
        return parse_payload(cap.result, getattr(response, cap.variant))

    def version_get(self) -> VersionResponse:
        return self.call(CommandId.VERSION_GET)

    def adc_chs_get(self) -> AdcChannelsResponse:
        return self.call(CommandId.ADC_CHS_GET)

    def adc_ch_read(self, ch: int) -> AdcReadResponse:
        return self.call(CommandId.ADC_CH_READ, ch=ch)

    def pwm_chs_get(self) -> PwmChannelsResponse:
        return self.call(CommandId.PWM_CHS_GET)

    def pwm_ch_set(self, ch: int, period: int, pulse: int) -> PwmChannelResponse:
        return self.call(CommandId.PWM_CH_SET, ch=ch, period=period, pulse=pulse)

    def pwm_ch_get(self, ch: int) -> PwmChannelResponse:
        return self.call(CommandId.PWM_CH_GET, ch=ch)

    def pwm_period_interval_get(self) -> PwmPeriodIntervalResponse:
        return self.call(CommandId.PWM_PERIOD_INTERVAL_GET)

    def __repr__(self) -> str:
        return f"Esp32Client({self._endpoint})"
