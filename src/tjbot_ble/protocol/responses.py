"""Response encoding and parsing."""

from __future__ import annotations

import json
from typing import Any

from ..exceptions import InvalidResponseError

ERROR_KEY = "error"


def encode_response(value: Any) -> bytes:
    """Serialize a reply value to UTF-8 JSON bytes (without terminator).

    Raises:
        TypeError: If value is not JSON-serializable
    """
    return json.dumps(value, separators=(",", ":")).encode("utf-8")


def error_reply(error: BaseException | str) -> dict[str, str]:
    """Build the ``{"error": message}`` reply for a failed request."""
    message = error if isinstance(error, str) else (str(error) or error.__class__.__name__)
    return {ERROR_KEY: message}


def is_error_reply(value: Any) -> bool:
    """Check if a decoded reply is an error payload."""
    return isinstance(value, dict) and ERROR_KEY in value


def parse_response(frame: bytes) -> Any:
    """Decode a reassembled response frame.

    Raises:
        InvalidResponseError: If the frame is not UTF-8 JSON
    """
    try:
        return json.loads(frame.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidResponseError(f"Response is not valid JSON: {e}") from e


def truncate_utf8(text: str, max_size: int) -> bytes:
    """Encode text, cut to at most max_size bytes on a code point boundary.

    Args:
        text: Text to encode
        max_size: Byte limit (0 = no limit)
    """
    encoded = text.encode("utf-8")
    if max_size <= 0 or len(encoded) <= max_size:
        return encoded
    return encoded[:max_size].decode("utf-8", errors="ignore").encode("utf-8")
