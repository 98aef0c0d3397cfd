"""TJBot command service: the characteristics the radio exposes to a client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .channels import ListenChannel, NotifyChannel, ResponseChannel
from .dispatcher import CommandDispatcher
from .exceptions import DeliveryError
from .models.config import ServiceConfig
from .models.enums import Channel, WriteResult
from .models.outcome import DispatchOutcome
from .protocol.chunking import FrameAssembler, InboundBuffer
from .protocol.commands import (
    COMMAND_CHAR_UUID,
    COMMAND_SERVICE_UUID,
    LISTEN_CHAR_UUID,
    REQUEST_CHAR_UUID,
    RESPONSE_CHAR_UUID,
)
from .protocol.registry import HandlerContext

if TYPE_CHECKING:
    from .actuator import Actuator

_LOGGER = logging.getLogger(__name__)


class WriteChannel:
    """A write characteristic: reassembles frames and dispatches them.

    The radio must wait for ``on_write`` to return before delivering the
    next fragment on the same channel.
    """

    def __init__(self, name: str, channel: Channel, dispatcher: CommandDispatcher):
        self.name = name
        self.channel = channel
        self.dispatcher = dispatcher
        self.assembler = FrameAssembler(InboundBuffer(), name=name)

    async def write(self, data: bytes) -> list[DispatchOutcome]:
        """Buffer a fragment and dispatch every frame it completes."""
        outcomes = []
        for frame in self.assembler.feed(bytes(data)):
            outcomes.append(await self.dispatcher.dispatch(frame, self.channel))
        return outcomes

    async def on_write(
            self,
            data: bytes,
            offset: int = 0,
            without_response: bool = False,
    ) -> WriteResult:
        """Radio callback for a write request.

        Returns:
            SUCCESS while a frame is still incomplete or when every completed
            frame was accepted, otherwise UNLIKELY_ERROR
        """
        _LOGGER.debug("Received %s data (%d bytes, offset %d)", self.name, len(data), offset)
        outcomes = await self.write(data)
        if all(outcome.result.is_success for outcome in outcomes):
            return WriteResult.SUCCESS
        return WriteResult.UNLIKELY_ERROR

    def reset(self) -> None:
        self.assembler.reset()


class CommandService:
    """Binds framing, dispatch and notification channels for one connection.

    Usage:
        service = CommandService(actuator, ServiceConfig(name="tjbot"))
        radio.on_write(COMMAND_CHAR_UUID, service.command.on_write)
        radio.on_subscribe(RESPONSE_CHAR_UUID, service.response.on_subscribe)
    """

    uuid = COMMAND_SERVICE_UUID

    def __init__(self, actuator: Actuator, config: ServiceConfig | None = None):
        """Initialize command service.

        Args:
            actuator: Performs the robot's physical and cloud actions
            config: Service settings (defaults if omitted)
        """
        self.actuator = actuator
        self.config = config if config is not None else ServiceConfig()

        self.response = ResponseChannel()
        self.listen = ListenChannel(stop_stream=actuator.stop_listening)

        context = HandlerContext(
            actuator=actuator,
            config=self.config,
            on_listen_text=self.received_listen_text,
        )
        self.dispatcher = CommandDispatcher(
            context,
            reply=self.write_response_object,
            always_ack_requests=self.config.always_ack_requests,
        )
        self.command = WriteChannel("command", Channel.FIRE_AND_FORGET, self.dispatcher)
        self.request = WriteChannel("request", Channel.REQUEST, self.dispatcher)

    @property
    def characteristics(self) -> dict[str, WriteChannel | NotifyChannel]:
        """Characteristic UUID to channel, for registering with the radio."""
        return {
            COMMAND_CHAR_UUID: self.command,
            REQUEST_CHAR_UUID: self.request,
            RESPONSE_CHAR_UUID: self.response,
            LISTEN_CHAR_UUID: self.listen,
        }

    def write_response_object(self, obj: Any) -> DeliveryError | None:
        """Deliver one reply on the response channel."""
        _LOGGER.debug("Writing response object: %s", obj)
        return self.response.deliver(obj)

    def received_listen_text(self, text: str) -> DeliveryError | None:
        """Forward one speech-to-text item to the listen channel."""
        return self.listen.deliver_text(text)

    def on_disconnect(self) -> None:
        """Clear all per-connection state after the client disconnects.

        Outstanding actuator work is left to finish; its replies are dropped
        because nothing is subscribed any more.
        """
        _LOGGER.info("Client disconnected, resetting command service")
        self.command.reset()
        self.request.reset()
        self.response.on_unsubscribe()
        self.listen.on_unsubscribe()

    async def drain(self) -> None:
        """Wait for all outstanding commands to finish."""
        await self.dispatcher.drain()
