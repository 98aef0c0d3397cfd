"""Shared fixtures: a recording actuator and notification sinks."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from tjbot_ble import CommandService, FrameAssembler, ServiceConfig
from tjbot_ble.protocol.responses import parse_response


class FakeActuator:
    """Records every call; results and failures are configured per method.

    Methods listed in ``async_methods`` return a coroutine instead of a value.
    """

    def __init__(self):
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.results: dict[str, Any] = {}
        self.errors: dict[str, BaseException] = {}
        self.async_methods: set[str] = set()
        self.listen_callback: Callable[[str], None] | None = None

    def _call(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        if name in self.async_methods:
            return self._async_result(name)
        if name in self.errors:
            raise self.errors[name]
        return self.results.get(name)

    async def _async_result(self, name: str) -> Any:
        await asyncio.sleep(0)
        if name in self.errors:
            raise self.errors[name]
        return self.results.get(name)

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    def sleep(self, msec):
        return self._call("sleep", msec)

    def listen(self, on_text):
        self.listen_callback = on_text
        return self._call("listen")

    def pause_listening(self):
        return self._call("pause_listening")

    def resume_listening(self):
        return self._call("resume_listening")

    def stop_listening(self):
        return self._call("stop_listening")

    def shine(self, color):
        return self._call("shine", color)

    def pulse(self, color, duration):
        return self._call("pulse", color, duration)

    def arm_back(self):
        return self._call("arm_back")

    def raise_arm(self):
        return self._call("raise_arm")

    def lower_arm(self):
        return self._call("lower_arm")

    def wave(self):
        return self._call("wave")

    def analyze_tone(self, text):
        return self._call("analyze_tone", text)

    def converse(self, workspace_id, message):
        return self._call("converse", workspace_id, message)

    def take_photo(self, path):
        return self._call("take_photo", path)

    def recognize_objects_in_photo(self, path):
        return self._call("recognize_objects_in_photo", path)

    def recognize_text_in_photo(self, path):
        return self._call("recognize_text_in_photo", path)

    def shine_colors(self):
        return self._call("shine_colors")

    def random_color(self):
        return self._call("random_color")

    def speak(self, message):
        return self._call("speak", message)

    def play(self, sound_file):
        return self._call("play", sound_file)

    def translate(self, text, source_language, target_language):
        return self._call("translate", text, source_language, target_language)

    def identify_language(self, text):
        return self._call("identify_language", text)

    def is_translatable(self, source_language, target_language):
        return self._call("is_translatable", source_language, target_language)


class RecordingSink:
    """Notification sink that keeps every payload it was given."""

    def __init__(self):
        self.payloads: list[bytes] = []

    def __call__(self, payload: bytes) -> None:
        self.payloads.append(bytes(payload))

    def replies(self) -> list[Any]:
        """Reassemble the recorded chunks into decoded replies."""
        assembler = FrameAssembler()
        frames = []
        for payload in self.payloads:
            frames.extend(assembler.feed(payload))
        return [parse_response(frame) for frame in frames]


@pytest.fixture
def actuator() -> FakeActuator:
    return FakeActuator()


@pytest.fixture
def config(tmp_path) -> ServiceConfig:
    return ServiceConfig(name="TJBot-Test", photo_dir=str(tmp_path / "photos"))


@pytest.fixture
def response_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def listen_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def service(actuator, config, response_sink, listen_sink) -> CommandService:
    """Command service with both notification channels subscribed (20-byte chunks)."""
    svc = CommandService(actuator, config)
    svc.response.on_subscribe(20, response_sink)
    svc.listen.on_subscribe(20, listen_sink)
    return svc
