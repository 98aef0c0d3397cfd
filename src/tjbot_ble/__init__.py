"""TJBot BLE Protocol Package.

  Command framing, dispatch and chunked replies for remote-controlling a
  TJBot over Bluetooth Low Energy, plus a bleak-based client.
  """

from .actuator import Actuator
from .channels import ListenChannel, ResponseChannel
from .device import TJBotDevice
from .dispatcher import CommandDispatcher
from .exceptions import (
    ActuatorError,
    BLEConnectionError,
    BLETimeoutError,
    ConfigParseError,
    DeliveryError,
    FramingError,
    InvalidResponseError,
    ProtocolError,
    RemoteCommandError,
    TJBotBLEError,
)
from .models import (
    Channel,
    DispatchOutcome,
    ServiceConfig,
    SubscriptionState,
    SubscriptionStatus,
    WriteResult,
    config_from_json,
    config_to_json,
    load_config,
)
from .protocol import (
    COMMAND_CHAR_UUID,
    COMMAND_SERVICE_UUID,
    LISTEN_CHAR_UUID,
    REQUEST_CHAR_UUID,
    RESPONSE_CHAR_UUID,
    TJBOT_SERVICE_UUID,
    Command,
    CommandName,
    FrameAssembler,
    chunk_data,
)
from .service import CommandService, WriteChannel

__version__ = "0.1.0"

__all__ = [
    # Robot side
    "Actuator",
    "CommandService",
    "CommandDispatcher",
    "WriteChannel",
    "ResponseChannel",
    "ListenChannel",
    # Client side
    "TJBotDevice",
    # Exceptions
    "TJBotBLEError",
    "FramingError",
    "ProtocolError",
    "ActuatorError",
    "DeliveryError",
    "ConfigParseError",
    "BLEConnectionError",
    "BLETimeoutError",
    "InvalidResponseError",
    "RemoteCommandError",
    # Models
    "Channel",
    "Command",
    "CommandName",
    "DispatchOutcome",
    "ServiceConfig",
    "SubscriptionState",
    "SubscriptionStatus",
    "WriteResult",
    # Utilities
    "FrameAssembler",
    "chunk_data",
    "config_from_json",
    "config_to_json",
    "load_config",
    # Constants
    "TJBOT_SERVICE_UUID",
    "COMMAND_SERVICE_UUID",
    "COMMAND_CHAR_UUID",
    "REQUEST_CHAR_UUID",
    "RESPONSE_CHAR_UUID",
    "LISTEN_CHAR_UUID",
]
