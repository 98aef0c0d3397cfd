"""Test client-side framing in BLEConnection."""

from __future__ import annotations

import pytest

from tjbot_ble.exceptions import BLEConnectionError, BLETimeoutError, InvalidResponseError
from tjbot_ble.protocol import REQUEST_CHAR_UUID, build_command_frame
from tjbot_ble.transport import BLEConnection


class _FakeClient:
    def __init__(self, mtu_size: int = 23, fail: bool = False):
        self.is_connected = True
        self.mtu_size = mtu_size
        self.fail = fail
        self.writes: list[tuple[str, bytes, bool]] = []

    async def write_gatt_char(self, char_uuid, data, response=False):
        if self.fail:
            raise RuntimeError("ATT error 0x0e")
        self.writes.append((char_uuid, bytes(data), response))


def _connection(client: _FakeClient | None = None) -> BLEConnection:
    connection = BLEConnection("AA:BB:CC:DD:EE:FF")
    connection._client = client  # Inject fake client
    return connection


@pytest.mark.asyncio
async def test_response_chunks_are_reassembled():
    connection = _connection()

    connection._response_callback(None, bytearray(b'{"message":'))
    connection._response_callback(None, bytearray(b'"hi"}\x00"#ff0000"'))
    connection._response_callback(None, bytearray(b"\x00"))

    assert await connection.read_response(timeout=0.1) == {"message": "hi"}
    assert await connection.read_response(timeout=0.1) == "#ff0000"


@pytest.mark.asyncio
async def test_undecodable_response_is_raised_to_reader():
    connection = _connection()

    connection._response_callback(None, bytearray(b"not json\x00"))

    with pytest.raises(InvalidResponseError):
        await connection.read_response(timeout=0.1)


@pytest.mark.asyncio
async def test_clear_responses_drops_queued_replies():
    connection = _connection()
    connection._response_callback(None, bytearray(b'"stale"\x00'))

    assert connection.clear_responses() == 1

    connection._response_callback(None, bytearray(b'"fresh"\x00'))
    assert await connection.read_response(timeout=0.1) == "fresh"


@pytest.mark.asyncio
async def test_read_response_timeout():
    connection = _connection()

    with pytest.raises(BLETimeoutError, match="No response received"):
        await connection.read_response(timeout=0.01)


@pytest.mark.asyncio
async def test_listen_notifications_are_text():
    connection = _connection()

    connection._listen_callback(None, bytearray("hola señor".encode("utf-8")))

    assert await connection.read_listen_text(timeout=0.1) == "hola señor"


@pytest.mark.asyncio
async def test_write_frame_splits_to_mtu():
    client = _FakeClient(mtu_size=23)
    connection = _connection(client)
    frame = build_command_frame("translate", {"text": "a" * 40, "sourceLanguage": "en", "targetLanguage": "fr"})

    await connection.write_frame(REQUEST_CHAR_UUID, frame)

    assert all(len(data) <= 20 for _, data, _ in client.writes)
    assert all(response for _, _, response in client.writes)
    assert {uuid for uuid, _, _ in client.writes} == {REQUEST_CHAR_UUID}
    assert b"".join(data for _, data, _ in client.writes) == frame


@pytest.mark.asyncio
async def test_write_frame_uses_larger_mtu():
    client = _FakeClient(mtu_size=247)
    connection = _connection(client)
    frame = build_command_frame("wave")

    await connection.write_frame(REQUEST_CHAR_UUID, frame)

    assert len(client.writes) == 1
    assert connection.write_size == 244


@pytest.mark.asyncio
async def test_write_frame_rejected():
    connection = _connection(_FakeClient(fail=True))

    with pytest.raises(BLEConnectionError, match="Write failed"):
        await connection.write_frame(REQUEST_CHAR_UUID, build_command_frame("wave"))


@pytest.mark.asyncio
async def test_write_frame_requires_connection():
    connection = _connection()

    with pytest.raises(BLEConnectionError, match="Not connected"):
        await connection.write_frame(REQUEST_CHAR_UUID, build_command_frame("wave"))
    assert not connection.is_connected
