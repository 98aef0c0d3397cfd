"""Exceptions raised by the TJBot BLE protocol package."""

from __future__ import annotations


class TJBotBLEError(Exception):
    """Base class for all tjbot_ble errors."""


class FramingError(TJBotBLEError):
    """A complete frame could not be decoded as a command."""


class ProtocolError(TJBotBLEError):
    """A decoded command is missing its name, is unknown, or lacks arguments."""


class ActuatorError(TJBotBLEError):
    """The actuator raised, or its asynchronous result failed."""

    def __init__(self, command: str, cause: BaseException):
        self.command = command
        self.cause = cause
        super().__init__(str(cause) or cause.__class__.__name__)


class DeliveryError(TJBotBLEError):
    """A notification could not be delivered to the remote client."""

    def __init__(self, channel: str, reason: str):
        self.channel = channel
        self.reason = reason
        super().__init__(f"{channel}: {reason}")


class ConfigParseError(TJBotBLEError):
    """Service configuration is invalid."""


class BLEConnectionError(TJBotBLEError):
    """Connecting to, or writing to, the robot failed."""


class BLETimeoutError(TJBotBLEError):
    """A BLE operation did not complete in time."""


class InvalidResponseError(TJBotBLEError):
    """A reply received from the robot could not be decoded."""


class RemoteCommandError(TJBotBLEError):
    """The robot replied to a request with an ``error`` payload."""

    def __init__(self, command: str, message: str):
        self.command = command
        self.message = message
        super().__init__(f"{command} failed: {message}")
