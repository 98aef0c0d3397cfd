"""Validate decoded frames and route them to actuator handlers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from .exceptions import ActuatorError, FramingError, ProtocolError, TJBotBLEError
from .models.enums import Channel, WriteResult
from .models.outcome import DispatchOutcome
from .protocol.commands import Command, decode_command
from .protocol.registry import (
    COMMAND_HANDLERS,
    HandlerContext,
    HandlerDescriptor,
    format_missing_args,
    get_handler,
    invoke_handler,
)
from .protocol.responses import error_reply

_LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    """Runs commands from both write channels against the actuator.

    Accepted commands run in their own task, so the write acknowledgment is
    returned before the actuator finishes. Every request command produces
    exactly one reply through ``reply`` once its own task completes.
    """

    def __init__(
            self,
            context: HandlerContext,
            reply: Callable[[Any], Any],
            always_ack_requests: bool = False,
    ):
        """Initialize dispatcher.

        Args:
            context: Collaborators passed to every handler
            reply: Sends one reply value on the response channel
            always_ack_requests: Acknowledge request-channel writes rejected by
                a ProtocolError as successful (the error is still sent as a
                reply). Undecodable frames are always acknowledged negatively.
        """
        self.context = context
        self._reply = reply
        self.always_ack_requests = always_ack_requests
        self._pending: set[asyncio.Task[Any]] = set()

    async def dispatch(self, frame: bytes, channel: Channel) -> DispatchOutcome:
        """Decode, validate and start one command.

        Args:
            frame: Complete frame (terminator removed)
            channel: Channel the frame arrived on

        Returns:
            DispatchOutcome with the write acknowledgment and, for accepted
            commands, the task running the actuator call
        """
        command: Command | None = None
        try:
            command = decode_command(frame)
            descriptor = self._lookup(command, channel)
        except (FramingError, ProtocolError) as e:
            return self._reject(channel, e, command)

        _LOGGER.info("Received %s command %s", channel.value, command.name)
        task = asyncio.create_task(self._run(descriptor, command, channel))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return DispatchOutcome(
            channel=channel,
            result=WriteResult.SUCCESS,
            command=command,
            completion=task,
        )

    def _lookup(self, command: Command, channel: Channel) -> HandlerDescriptor:
        descriptor = get_handler(channel, command.name)
        if descriptor is None:
            other = next(
                (c for c in Channel if c is not channel and command.name in COMMAND_HANDLERS[c]),
                None,
            )
            if other is not None:
                raise ProtocolError(
                    f"Command {command.name} must be sent on the {other.value} channel"
                )
            raise ProtocolError(f"Unknown command received: {command.name}")

        missing = descriptor.missing_args(command.args)
        if missing:
            raise ProtocolError(format_missing_args(missing))
        return descriptor

    def _reject(
            self,
            channel: Channel,
            error: TJBotBLEError,
            command: Command | None,
    ) -> DispatchOutcome:
        _LOGGER.error("Rejected %s frame: %s", channel.value, error)
        result = WriteResult.UNLIKELY_ERROR
        if channel is Channel.REQUEST:
            self._reply(error_reply(error))
            if self.always_ack_requests and isinstance(error, ProtocolError):
                result = WriteResult.SUCCESS
        return DispatchOutcome(channel=channel, result=result, command=command, error=error)

    async def _run(self, descriptor: HandlerDescriptor, command: Command, channel: Channel) -> Any:
        try:
            result = await invoke_handler(descriptor, self.context, command.args)
        except Exception as e:
            error = ActuatorError(command.name, e)
            _LOGGER.error("Actuator failed running %s: %s", command.name, error)
            if channel is Channel.REQUEST:
                reply = error_reply(error)
                self._reply(reply)
                return reply
            return None

        if channel is Channel.REQUEST:
            _LOGGER.debug("Replying to %s", command.name)
            self._reply(result)
        return result

    @property
    def pending(self) -> int:
        """Number of commands whose actuator work has not finished."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every outstanding command to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
