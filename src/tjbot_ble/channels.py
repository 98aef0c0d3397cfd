"""Notification channels that carry data back to the remote client."""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from .exceptions import DeliveryError
from .models.subscription import NotificationSink, SubscriptionState
from .protocol.chunking import chunk_data
from .protocol.responses import encode_response, truncate_utf8

_LOGGER = logging.getLogger(__name__)


class NotifyChannel:
    """Base for notify characteristics: tracks the client's subscription."""

    def __init__(self, name: str):
        self.name = name
        self.subscription = SubscriptionState(name)

    def on_subscribe(self, max_value_size: int, sink: NotificationSink) -> None:
        """Radio callback: the client enabled notifications."""
        self.subscription.subscribe(max_value_size, sink)

    def on_unsubscribe(self) -> None:
        """Radio callback: the client disabled notifications."""
        self.subscription.unsubscribe()

    @property
    def subscribed(self) -> bool:
        return self.subscription.subscribed

    def _dropped(self, reason: str) -> DeliveryError:
        error = DeliveryError(self.name, reason)
        _LOGGER.warning("Dropped notification on %s: %s", self.name, reason)
        return error


class ResponseChannel(NotifyChannel):
    """One-shot replies, chunked to the negotiated size and null-terminated."""

    def __init__(self, name: str = "response"):
        super().__init__(name)

    def deliver(self, value: Any) -> DeliveryError | None:
        """Encode a reply and write it as chunks followed by the terminator.

        Args:
            value: JSON-serializable reply

        Returns:
            None on success, or the DeliveryError describing why nothing
            (or not everything) was written
        """
        subscription = self.subscription.snapshot()
        if subscription is None:
            return self._dropped("device did not subscribe to response channel")

        try:
            data = encode_response(value)
        except (TypeError, ValueError) as e:
            return self._dropped(f"reply is not JSON-serializable: {e}")

        chunks = chunk_data(data, subscription.max_chunk_size)
        _LOGGER.debug(
            "Writing %d byte response in %d chunks of up to %d bytes",
            len(data),
            len(chunks),
            subscription.max_chunk_size,
        )
        for index, chunk in enumerate(chunks, start=1):
            try:
                subscription.sink(chunk)
            except Exception as e:
                return self._dropped(f"sink failed on chunk {index}: {e}")
        return None


class ListenChannel(NotifyChannel):
    """Continuous speech-to-text stream, one truncated item per notification.

    Text may be delivered from any thread. An async ``stop_stream`` is run
    on the event loop the channel was created or subscribed on.

    Args:
        stop_stream: Called when text arrives with nobody subscribed
        loop: Event loop for async stops (defaults to the running loop)
    """

    def __init__(
            self,
            stop_stream: Callable[[], Any],
            name: str = "listen",
            loop: asyncio.AbstractEventLoop | None = None,
    ):
        super().__init__(name)
        self._stop_stream = stop_stream
        self._loop = loop if loop is not None else _running_loop()
        self._stopping: set[asyncio.Future[Any] | concurrent.futures.Future[Any]] = set()

    def on_subscribe(self, max_value_size: int, sink: NotificationSink) -> None:
        super().on_subscribe(max_value_size, sink)
        if self._loop is None:
            self._loop = _running_loop()

    def deliver_text(self, text: str) -> DeliveryError | None:
        """Send one stream item, truncated to the negotiated size.

        If the client is not subscribed the item is dropped and the stream
        is stopped at the source.
        """
        subscription = self.subscription.snapshot()
        if subscription is None:
            error = self._dropped("device is not subscribed to listen channel, stopping listen")
            self._stop()
            return error

        payload = truncate_utf8(text, subscription.max_chunk_size)
        _LOGGER.debug("Updating listen value (%d bytes)", len(payload))
        try:
            subscription.sink(payload)
        except Exception as e:
            return self._dropped(f"sink failed: {e}")
        return None

    def _stop(self) -> None:
        try:
            result = self._stop_stream()
            if inspect.isawaitable(result):
                self._schedule_stop(result)
        except Exception:
            _LOGGER.exception("Failed to stop listen stream")

    def _schedule_stop(self, awaitable: Awaitable[Any]) -> None:
        running = _running_loop()
        if running is not None:
            future = asyncio.ensure_future(awaitable)
        elif self._loop is not None and not self._loop.is_closed():
            future = asyncio.run_coroutine_threadsafe(_await(awaitable), self._loop)
        else:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise RuntimeError("no event loop available to run stop_listening")
        self._stopping.add(future)
        future.add_done_callback(self._stop_done)

    def _stop_done(self, future: asyncio.Future[Any] | concurrent.futures.Future[Any]) -> None:
        self._stopping.discard(future)
        if not future.cancelled() and future.exception() is not None:
            _LOGGER.error("Failed to stop listen stream: %s", future.exception())


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable
