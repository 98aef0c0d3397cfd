"""Data models for the TJBot BLE service."""

from .config import ServiceConfig
from .config_json import config_from_json, config_to_json, load_config
from .enums import Channel, SubscriptionStatus, WriteResult
from .outcome import DispatchOutcome
from .subscription import NotificationSink, Subscription, SubscriptionState

__all__ = [
    "Channel",
    "DispatchOutcome",
    "NotificationSink",
    "ServiceConfig",
    "Subscription",
    "SubscriptionState",
    "SubscriptionStatus",
    "WriteResult",
    "config_from_json",
    "config_to_json",
    "load_config",
]
