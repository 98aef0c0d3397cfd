"""Notification channel subscription state."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .enums import SubscriptionStatus

_LOGGER = logging.getLogger(__name__)

NotificationSink = Callable[[bytes], None]


@dataclass(frozen=True)
class Subscription:
    """Snapshot of a subscribed channel: where to write and how much at a time."""

    sink: NotificationSink
    max_chunk_size: int = 0


class SubscriptionState:
    """Subscribe/unsubscribe state machine for one notification channel.

    Unsubscribed (initial) -> Subscribed (sink + negotiated size) -> Unsubscribed.
    Readers take a ``snapshot()`` per delivery so a concurrent unsubscribe
    only takes effect between deliveries.
    """

    def __init__(self, name: str):
        self.name = name
        self._current: Subscription | None = None

    def subscribe(self, max_chunk_size: int, sink: NotificationSink) -> None:
        """Record a subscription from the remote client.

        Args:
            max_chunk_size: Negotiated maximum notification size (0 = unknown)
            sink: Callable that sends one notification payload

        Raises:
            ValueError: If max_chunk_size is negative
        """
        if max_chunk_size is None:
            max_chunk_size = 0
        if max_chunk_size < 0:
            raise ValueError(f"max_chunk_size must be >= 0, got {max_chunk_size}")
        _LOGGER.info("Device subscribed to %s (max %d bytes)", self.name, max_chunk_size)
        self._current = Subscription(sink=sink, max_chunk_size=max_chunk_size)

    def unsubscribe(self) -> None:
        """Clear the subscription."""
        if self._current is not None:
            _LOGGER.info("Device unsubscribed from %s", self.name)
        self._current = None

    def snapshot(self) -> Subscription | None:
        """Current subscription, or None when unsubscribed."""
        return self._current

    @property
    def status(self) -> SubscriptionStatus:
        if self._current is None:
            return SubscriptionStatus.UNSUBSCRIBED
        return SubscriptionStatus.SUBSCRIBED

    @property
    def subscribed(self) -> bool:
        return self._current is not None

    @property
    def sink(self) -> NotificationSink | None:
        return self._current.sink if self._current else None

    @property
    def max_chunk_size(self) -> int:
        return self._current.max_chunk_size if self._current else 0
