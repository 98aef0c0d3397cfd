from __future__ import annotations

from enum import Enum, IntEnum


class Channel(Enum):
    """Logical write channel a command arrived on."""
    FIRE_AND_FORGET = "command"   # Command characteristic, no reply
    REQUEST = "request"           # Request characteristic, reply on response channel


class WriteResult(IntEnum):
    """ATT result codes returned to the radio for a write request."""
    SUCCESS = 0x00
    UNLIKELY_ERROR = 0x0E

    @property
    def is_success(self) -> bool:
        return self is WriteResult.SUCCESS


class SubscriptionStatus(IntEnum):
    """Notification channel subscription states."""
    UNSUBSCRIBED = 0
    SUBSCRIBED = 1
