"""BLE protocol commands for the TJBot command service."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exceptions import FramingError, ProtocolError
from .chunking import TERMINATOR


class CommandName(str, Enum):
    """Command names understood by the robot."""

    # Fire-and-forget (command characteristic)
    SLEEP = "sleep"
    LISTEN = "listen"
    PAUSE_LISTENING = "pauseListening"
    RESUME_LISTENING = "resumeListening"
    STOP_LISTENING = "stopListening"
    SHINE = "shine"
    PULSE = "pulse"
    ARM_BACK = "armBack"
    RAISE_ARM = "raiseArm"
    LOWER_ARM = "lowerArm"
    WAVE = "wave"

    # Request/response (request characteristic)
    ANALYZE_TONE = "analyzeTone"
    CONVERSE = "converse"
    SEE = "see"
    READ = "read"
    SHINE_COLORS = "shineColors"
    RANDOM_COLOR = "randomColor"
    SPEAK = "speak"
    PLAY = "play"
    TRANSLATE = "translate"
    IDENTIFY_LANGUAGE = "identifyLanguage"
    IS_TRANSLATABLE = "isTranslatable"


# GATT identifiers
TJBOT_SERVICE_UUID = "799d5f0d-0000-0000-a6a2-da053e2a640a"  # Advertised
CONFIGURATION_SERVICE_UUID = "799d5f0d-0001-0000-a6a2-da053e2a640a"
COMMAND_SERVICE_UUID = "799d5f0d-0002-0000-a6a2-da053e2a640a"
COMMAND_CHAR_UUID = "799d5f0d-0002-0001-a6a2-da053e2a640a"    # write
REQUEST_CHAR_UUID = "799d5f0d-0002-0002-a6a2-da053e2a640a"    # write
RESPONSE_CHAR_UUID = "799d5f0d-0002-0003-a6a2-da053e2a640a"   # notify
LISTEN_CHAR_UUID = "799d5f0d-0002-0004-a6a2-da053e2a640a"     # notify

# Argument limits
PULSE_MIN_DURATION = 0.5
PULSE_MAX_DURATION = 3.0
MAX_IDENTIFIED_LANGUAGES = 5

# Older clients send the command name under "cmd"
NAME_KEYS = ("name", "cmd")


@dataclass(frozen=True)
class Command:
    """A decoded command frame."""

    name: str
    args: Mapping[str, Any] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "args": dict(self.args)}


def decode_command(frame: bytes) -> Command:
    """Decode one complete frame into a Command.

    Args:
        frame: Frame bytes with the terminator already removed

    Returns:
        Command with args defaulted to an empty mapping

    Raises:
        FramingError: If the frame is empty or not UTF-8 JSON
        ProtocolError: If the JSON has no command name or args is not an object
    """
    if not frame:
        raise FramingError("Empty frame")
    try:
        decoded = json.loads(frame.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FramingError(f"Could not decode JSON from frame: {e}") from e

    if not isinstance(decoded, dict):
        raise ProtocolError("Expected 'name' in command")

    name = next((decoded[key] for key in NAME_KEYS if decoded.get(key) is not None), None)
    if name is None:
        raise ProtocolError("Expected 'name' in command")
    if not isinstance(name, str):
        raise ProtocolError(f"Command name must be a string, got {type(name).__name__}")

    args = decoded.get("args")
    if args is None:
        args = {}
    elif not isinstance(args, dict):
        raise ProtocolError(f"Expected 'args' to be an object, got {type(args).__name__}")

    return Command(name=name, args=args)


def build_command_frame(name: str | CommandName, args: Mapping[str, Any] | None = None) -> bytes:
    """Encode a command as a terminated frame, ready to be split into writes.

    Returns:
        UTF-8 JSON text followed by the terminator byte
    """
    if isinstance(name, CommandName):
        name = name.value
    payload: dict[str, Any] = {"name": name}
    if args:
        payload["args"] = dict(args)
    return json.dumps(payload, separators=(",", ":")).encode("utf-8") + TERMINATOR


def clamp_pulse_duration(duration: float) -> float:
    """Clamp a pulse duration to the range the LED driver supports."""
    return min(max(float(duration), PULSE_MIN_DURATION), PULSE_MAX_DURATION)
