"""Remote control API for a TJBot over BLE."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import BLEConnectionError, BLETimeoutError, RemoteCommandError
from .protocol import (
    COMMAND_CHAR_UUID,
    ERROR_KEY,
    REQUEST_CHAR_UUID,
    CommandName,
    build_command_frame,
    is_error_reply,
)
from .transport import BLEConnection

if TYPE_CHECKING:
    from bleak.backends.device import BLEDevice

_LOGGER = logging.getLogger(__name__)


class TJBotDevice:
    """TJBot reachable over BLE.

    Usage:
        async with TJBotDevice("AA:BB:CC:DD:EE:FF") as tj:
            await tj.shine("#00ff00")
            result = await tj.see()

            await tj.listen()
            async for text in tj.listen_texts():
                if text == "stop":
                    await tj.stop_listening()
                    break
    """

    TIMEOUT_REQUEST = 30.0  # Cloud calls and photo capture
    TIMEOUT_REJECTED_REPLY = 2.0  # Error reply that follows a rejected write

    def __init__(
            self,
            mac_address: str,
            ble_device: BLEDevice | None = None,
            timeout: float = 10.0,
    ):
        """Initialize TJBot device.

        Args:
            mac_address: Device MAC address
            ble_device: Optional BLEDevice from a previous scan
            timeout: BLE connection timeout in seconds (default: 10)
        """
        self.mac_address = mac_address
        self._connection = BLEConnection(mac_address, ble_device, timeout)
        self._request_lock = asyncio.Lock()

    async def __aenter__(self) -> TJBotDevice:
        await self._connection.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._connection.disconnect()

    async def command(self, name: str | CommandName, args: Mapping[str, Any] | None = None) -> None:
        """Send a fire-and-forget command.

        Raises:
            BLEConnectionError: If the robot rejected the command
        """
        frame = build_command_frame(name, args)
        _LOGGER.debug("Sending command %s", name)
        await self._connection.write_frame(COMMAND_CHAR_UUID, frame)

    async def request(
            self,
            name: str | CommandName,
            args: Mapping[str, Any] | None = None,
            timeout: float | None = None,
    ) -> Any:
        """Send a request and wait for its reply.

        Replies carry no request id, so requests are sent one at a time and
        replies left over from an earlier timed-out request are discarded
        before writing.

        Args:
            name: Command name
            args: Command arguments
            timeout: Reply timeout in seconds (default: TIMEOUT_REQUEST)

        Returns:
            Decoded reply value

        Raises:
            RemoteCommandError: If the robot replied with an error
            BLETimeoutError: If no reply arrived in time
        """
        command = name.value if isinstance(name, CommandName) else name
        frame = build_command_frame(command, args)

        async with self._request_lock:
            self._connection.clear_responses()
            _LOGGER.debug("Sending request %s", command)
            try:
                await self._connection.write_frame(REQUEST_CHAR_UUID, frame)
            except BLEConnectionError as write_error:
                # A rejected request is followed by an error reply; consume it.
                try:
                    reply = await self._connection.read_response(timeout=self.TIMEOUT_REJECTED_REPLY)
                except BLETimeoutError:
                    raise write_error from None
                self._raise_for_error(command, reply)
                raise

            reply = await self._connection.read_response(
                timeout=self.TIMEOUT_REQUEST if timeout is None else timeout
            )

        self._raise_for_error(command, reply)
        return reply

    @staticmethod
    def _raise_for_error(command: str, reply: Any) -> None:
        if is_error_reply(reply):
            raise RemoteCommandError(command, str(reply[ERROR_KEY]))

    # Fire-and-forget commands

    async def sleep(self, msec: int) -> None:
        await self.command(CommandName.SLEEP, {"msec": msec})

    async def listen(self) -> None:
        """Start streaming speech-to-text; read items with listen_texts()."""
        await self.command(CommandName.LISTEN)

    async def pause_listening(self) -> None:
        await self.command(CommandName.PAUSE_LISTENING)

    async def resume_listening(self) -> None:
        await self.command(CommandName.RESUME_LISTENING)

    async def stop_listening(self) -> None:
        await self.command(CommandName.STOP_LISTENING)

    async def shine(self, color: str) -> None:
        await self.command(CommandName.SHINE, {"color": color})

    async def pulse(self, color: str, duration: float = 1.0) -> None:
        """Pulse the LED; the robot clamps duration to 0.5-3.0 seconds."""
        await self.command(CommandName.PULSE, {"color": color, "duration": duration})

    async def arm_back(self) -> None:
        await self.command(CommandName.ARM_BACK)

    async def raise_arm(self) -> None:
        await self.command(CommandName.RAISE_ARM)

    async def lower_arm(self) -> None:
        await self.command(CommandName.LOWER_ARM)

    async def wave(self) -> None:
        await self.command(CommandName.WAVE)

    async def listen_texts(self, timeout: float | None = None) -> AsyncIterator[str]:
        """Yield speech-to-text items as they arrive.

        Args:
            timeout: Stop with BLETimeoutError if no item arrives in time
        """
        while True:
            yield await self._connection.read_listen_text(timeout=timeout)

    # Requests

    async def analyze_tone(self, text: str) -> Any:
        return await self.request(CommandName.ANALYZE_TONE, {"text": text})

    async def converse(self, workspace_id: str, message: str) -> Any:
        return await self.request(
            CommandName.CONVERSE,
            {"workspaceId": workspace_id, "message": message},
        )

    async def see(self) -> dict[str, Any]:
        """Take a photo and recognize objects.

        Returns:
            ``{"objects": ..., "imageURL": ...}``
        """
        return await self.request(CommandName.SEE)

    async def read(self) -> dict[str, Any]:
        """Take a photo and recognize text.

        Returns:
            ``{"objects": ..., "imageURL": ...}``
        """
        return await self.request(CommandName.READ)

    async def shine_colors(self) -> list[str]:
        return await self.request(CommandName.SHINE_COLORS)

    async def random_color(self) -> str:
        return await self.request(CommandName.RANDOM_COLOR)

    async def speak(self, message: str) -> dict[str, Any]:
        return await self.request(CommandName.SPEAK, {"message": message})

    async def play(self, sound_file: str) -> str:
        return await self.request(CommandName.PLAY, {"soundFile": sound_file})

    async def translate(self, text: str, source_language: str, target_language: str) -> Any:
        return await self.request(
            CommandName.TRANSLATE,
            {
                "text": text,
                "sourceLanguage": source_language,
                "targetLanguage": target_language,
            },
        )

    async def identify_language(self, text: str) -> dict[str, Any]:
        """Identify the language of text (at most 5 candidates, best first)."""
        return await self.request(CommandName.IDENTIFY_LANGUAGE, {"text": text})

    async def is_translatable(self, source_language: str, target_language: str) -> Any:
        return await self.request(
            CommandName.IS_TRANSLATABLE,
            {"sourceLanguage": source_language, "targetLanguage": target_language},
        )

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected
