"""Test response encoding and parsing."""

import pytest

from tjbot_ble.exceptions import InvalidResponseError, ProtocolError
from tjbot_ble.protocol.responses import (
    encode_response,
    error_reply,
    is_error_reply,
    parse_response,
    truncate_utf8,
)


class TestEncodeResponse:
    """Test reply serialization."""

    def test_compact_json(self):
        assert encode_response({"message": "hi"}) == b'{"message":"hi"}'

    def test_scalar_reply(self):
        assert encode_response("sounds/beep.wav") == b'"sounds/beep.wav"'

    def test_never_contains_terminator(self):
        assert b"\x00" not in encode_response({"text": "a\x00b"})

    def test_unserializable_raises(self):
        with pytest.raises(TypeError):
            encode_response({"obj": object()})


class TestErrorReply:
    """Test error payloads."""

    def test_from_exception(self):
        assert error_reply(ProtocolError("Unknown command received: x")) == {
            "error": "Unknown command received: x"
        }

    def test_from_string(self):
        assert error_reply("boom") == {"error": "boom"}

    def test_empty_exception_uses_class_name(self):
        assert error_reply(RuntimeError()) == {"error": "RuntimeError"}

    def test_is_error_reply(self):
        assert is_error_reply({"error": "x"})
        assert not is_error_reply({"message": "x"})
        assert not is_error_reply("error")


class TestParseResponse:
    """Test client-side reply decoding."""

    def test_parse_object(self):
        assert parse_response(b'{"languages":[]}') == {"languages": []}

    def test_invalid_json(self):
        with pytest.raises(InvalidResponseError, match="not valid JSON"):
            parse_response(b"{")


class TestTruncateUtf8:
    """Test listen text truncation."""

    def test_short_text_unchanged(self):
        assert truncate_utf8("hello", 20) == b"hello"

    def test_truncates_to_limit(self):
        assert truncate_utf8("hello world", 5) == b"hello"

    def test_zero_limit_means_no_truncation(self):
        assert truncate_utf8("x" * 1000, 0) == b"x" * 1000

    def test_does_not_split_code_points(self):
        # "é" is two bytes; a 4-byte cut would land inside the second one
        assert truncate_utf8("aéé", 4) == "aé".encode("utf-8")
