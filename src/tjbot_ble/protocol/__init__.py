"""BLE protocol implementation."""

from .chunking import TERMINATOR, ChunkSequence, FrameAssembler, InboundBuffer, chunk_data
from .commands import (
    COMMAND_CHAR_UUID,
    COMMAND_SERVICE_UUID,
    LISTEN_CHAR_UUID,
    MAX_IDENTIFIED_LANGUAGES,
    PULSE_MAX_DURATION,
    PULSE_MIN_DURATION,
    REQUEST_CHAR_UUID,
    RESPONSE_CHAR_UUID,
    TJBOT_SERVICE_UUID,
    Command,
    CommandName,
    build_command_frame,
    clamp_pulse_duration,
    decode_command,
)
from .registry import COMMAND_HANDLERS, HandlerContext, HandlerDescriptor, get_handler
from .responses import ERROR_KEY, encode_response, error_reply, is_error_reply, parse_response

__all__ = [
    "TERMINATOR",
    "ChunkSequence",
    "FrameAssembler",
    "InboundBuffer",
    "chunk_data",
    "TJBOT_SERVICE_UUID",
    "COMMAND_SERVICE_UUID",
    "COMMAND_CHAR_UUID",
    "REQUEST_CHAR_UUID",
    "RESPONSE_CHAR_UUID",
    "LISTEN_CHAR_UUID",
    "PULSE_MIN_DURATION",
    "PULSE_MAX_DURATION",
    "MAX_IDENTIFIED_LANGUAGES",
    "Command",
    "CommandName",
    "build_command_frame",
    "clamp_pulse_duration",
    "decode_command",
    "COMMAND_HANDLERS",
    "HandlerContext",
    "HandlerDescriptor",
    "get_handler",
    "ERROR_KEY",
    "encode_response",
    "error_reply",
    "is_error_reply",
    "parse_response",
]
