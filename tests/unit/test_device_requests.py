"""Test the TJBotDevice client API against a fake connection."""

from __future__ import annotations

import json

import pytest

from tjbot_ble import TJBotDevice
from tjbot_ble.exceptions import BLEConnectionError, BLETimeoutError, RemoteCommandError
from tjbot_ble.protocol import COMMAND_CHAR_UUID, REQUEST_CHAR_UUID


NO_REPLY = object()


class _FakeConnection:
    """Queues one reply per frame written, like a robot answering requests."""

    def __init__(self, responses: list | None = None, reject_writes: bool = False):
        self._replies_per_write = list(responses or [])
        self._queue: list = []
        self._listen: list[str] = []
        self.reject_writes = reject_writes
        self.written: list[tuple[str, bytes]] = []
        self.read_timeout: float | None = None

    def arrive(self, reply) -> None:
        """A reply notification shows up without a matching write."""
        self._queue.append(reply)

    async def write_frame(self, char_uuid: str, frame: bytes) -> None:
        self.written.append((char_uuid, frame))
        if self._replies_per_write:
            reply = self._replies_per_write.pop(0)
            if reply is not NO_REPLY:
                self._queue.append(reply)
        if self.reject_writes:
            raise BLEConnectionError("Write failed: ATT error 0x0e")

    def clear_responses(self) -> int:
        discarded = len(self._queue)
        self._queue.clear()
        return discarded

    async def read_response(self, timeout: float = 5.0):
        self.read_timeout = timeout
        if not self._queue:
            raise BLETimeoutError(f"No response received within {timeout}s")
        return self._queue.pop(0)

    async def read_listen_text(self, timeout: float | None = None) -> str:
        if not self._listen:
            raise BLETimeoutError("No listen text")
        return self._listen.pop(0)


def _device(fake: _FakeConnection) -> TJBotDevice:
    device = TJBotDevice(mac_address="AA:BB:CC:DD:EE:FF")
    device._connection = fake  # Inject fake connection
    return device


def _decode(frame: bytes) -> dict:
    assert frame.endswith(b"\x00")
    return json.loads(frame[:-1])


@pytest.mark.asyncio
async def test_shine_writes_command_frame() -> None:
    fake = _FakeConnection()
    device = _device(fake)

    await device.shine("#ff00ff")

    assert len(fake.written) == 1
    char_uuid, frame = fake.written[0]
    assert char_uuid == COMMAND_CHAR_UUID
    assert _decode(frame) == {"name": "shine", "args": {"color": "#ff00ff"}}


@pytest.mark.asyncio
async def test_wave_has_no_args() -> None:
    fake = _FakeConnection()
    device = _device(fake)

    await device.wave()

    assert _decode(fake.written[0][1]) == {"name": "wave"}


@pytest.mark.asyncio
async def test_translate_sends_request_and_returns_reply() -> None:
    reply = {"translations": [{"translation": "hello"}]}
    fake = _FakeConnection(responses=[reply])
    device = _device(fake)

    result = await device.translate("hola", "es", "en")

    char_uuid, frame = fake.written[0]
    assert char_uuid == REQUEST_CHAR_UUID
    assert _decode(frame) == {
        "name": "translate",
        "args": {"text": "hola", "sourceLanguage": "es", "targetLanguage": "en"},
    }
    assert result == reply
    assert fake.read_timeout == device.TIMEOUT_REQUEST


@pytest.mark.asyncio
async def test_request_timeout_override() -> None:
    fake = _FakeConnection(responses=["#123456"])
    device = _device(fake)

    assert await device.request("randomColor", timeout=1.5) == "#123456"
    assert fake.read_timeout == 1.5


@pytest.mark.asyncio
async def test_error_reply_raises_remote_command_error() -> None:
    fake = _FakeConnection(responses=[{"error": "tone service unavailable"}])
    device = _device(fake)

    with pytest.raises(RemoteCommandError, match="analyzeTone failed: tone service unavailable"):
        await device.analyze_tone("great day")


@pytest.mark.asyncio
async def test_rejected_request_consumes_error_reply() -> None:
    fake = _FakeConnection(
        responses=[{"error": "Unknown command received: doesNotExist"}],
        reject_writes=True,
    )
    device = _device(fake)

    with pytest.raises(RemoteCommandError, match="doesNotExist"):
        await device.request("doesNotExist")

    assert fake.read_timeout == device.TIMEOUT_REJECTED_REPLY


@pytest.mark.asyncio
async def test_rejected_request_without_reply_raises_write_error() -> None:
    fake = _FakeConnection(reject_writes=True)
    device = _device(fake)

    with pytest.raises(BLEConnectionError, match="Write failed"):
        await device.see()


@pytest.mark.asyncio
async def test_listen_texts_yields_stream_items() -> None:
    fake = _FakeConnection()
    fake._listen = ["hello", "goodbye"]
    device = _device(fake)

    await device.listen()
    received = []
    async for text in device.listen_texts(timeout=0.1):
        received.append(text)
        if text == "goodbye":
            break

    assert _decode(fake.written[0][1]) == {"name": "listen"}
    assert received == ["hello", "goodbye"]


@pytest.mark.asyncio
async def test_pulse_sends_duration_unclamped() -> None:
    fake = _FakeConnection()
    device = _device(fake)

    await device.pulse("red", duration=10)

    assert _decode(fake.written[0][1]) == {"name": "pulse", "args": {"color": "red", "duration": 10}}


@pytest.mark.asyncio
async def test_late_reply_after_timeout_is_not_taken_by_next_request() -> None:
    fake = _FakeConnection(responses=[NO_REPLY, "#123456"])
    device = _device(fake)

    with pytest.raises(BLETimeoutError):
        await device.translate("hola", "es", "en")
    fake.arrive({"translations": "late"})

    assert await device.random_color() == "#123456"
