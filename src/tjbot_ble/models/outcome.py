"""Result of dispatching one frame."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .enums import Channel, WriteResult

if TYPE_CHECKING:
    from ..exceptions import TJBotBLEError
    from ..protocol.commands import Command


@dataclass
class DispatchOutcome:
    """What the dispatcher decided for a frame.

    Attributes:
        channel: Channel the frame arrived on
        result: Write acknowledgment to return to the radio
        command: Decoded command (None if decoding failed)
        error: Framing/protocol error that rejected the frame, if any
        completion: Task running the actuator call, if one was started
    """

    channel: Channel
    result: WriteResult
    command: Command | None = None
    error: TJBotBLEError | None = None
    completion: asyncio.Task[Any] | None = None

    @property
    def accepted(self) -> bool:
        """True if the command was accepted for execution."""
        return self.error is None and self.command is not None

    async def wait(self) -> Any:
        """Wait for the actuator call to finish and return its reply value."""
        if self.completion is None:
            return None
        return await self.completion
