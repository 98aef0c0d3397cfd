"""Interface the command service expects from the robot."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, Union, runtime_checkable

# Handlers accept either a plain value or an awaitable from each method.
MaybeAwaitable = Union[Any, Awaitable[Any]]


@runtime_checkable
class Actuator(Protocol):
    """Physical and cloud actions performed on behalf of the remote client.

    Methods may return a value directly or an awaitable; the dispatcher
    treats both the same way.
    """

    # Fire-and-forget
    def sleep(self, msec: int) -> MaybeAwaitable: ...
    def listen(self, on_text: Callable[[str], None]) -> MaybeAwaitable: ...
    def pause_listening(self) -> MaybeAwaitable: ...
    def resume_listening(self) -> MaybeAwaitable: ...
    def stop_listening(self) -> MaybeAwaitable: ...
    def shine(self, color: str) -> MaybeAwaitable: ...
    def pulse(self, color: str, duration: float) -> MaybeAwaitable: ...
    def arm_back(self) -> MaybeAwaitable: ...
    def raise_arm(self) -> MaybeAwaitable: ...
    def lower_arm(self) -> MaybeAwaitable: ...
    def wave(self) -> MaybeAwaitable: ...

    # Request/response
    def analyze_tone(self, text: str) -> MaybeAwaitable: ...
    def converse(self, workspace_id: str, message: str) -> MaybeAwaitable: ...
    def take_photo(self, path: str) -> MaybeAwaitable: ...
    def recognize_objects_in_photo(self, path: str) -> MaybeAwaitable: ...
    def recognize_text_in_photo(self, path: str) -> MaybeAwaitable: ...
    def shine_colors(self) -> MaybeAwaitable: ...
    def random_color(self) -> MaybeAwaitable: ...
    def speak(self, message: str) -> MaybeAwaitable: ...
    def play(self, sound_file: str) -> MaybeAwaitable: ...
    def translate(self, text: str, source_language: str, target_language: str) -> MaybeAwaitable: ...
    def identify_language(self, text: str) -> MaybeAwaitable: ...
    def is_translatable(self, source_language: str, target_language: str) -> MaybeAwaitable: ...
