"""Static table of commands, their required arguments, and handlers.

Each handler takes a HandlerContext and the command args and returns either
the reply value or an awaitable resolving to it. Fire-and-forget handlers
return whatever the actuator returns; the value is discarded.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from ..models.config import ServiceConfig
from ..models.enums import Channel
from .commands import MAX_IDENTIFIED_LANGUAGES, CommandName, clamp_pulse_duration

if TYPE_CHECKING:
    from ..actuator import Actuator


@dataclass(frozen=True)
class HandlerContext:
    """Collaborators available to command handlers."""

    actuator: Actuator
    config: ServiceConfig
    on_listen_text: Callable[[str], Any]


Handler = Callable[[HandlerContext, Mapping[str, Any]], Any]


@dataclass(frozen=True)
class HandlerDescriptor:
    """Registry entry for one command."""

    name: CommandName
    channel: Channel
    required_args: tuple[str, ...]
    invoke: Handler

    @property
    def signature(self) -> str:
        """``"async"`` for coroutine handlers, ``"sync"`` otherwise."""
        return "async" if inspect.iscoroutinefunction(self.invoke) else "sync"

    def missing_args(self, args: Mapping[str, Any]) -> list[str]:
        """Required argument names absent from args, in declaration order."""
        return [arg for arg in self.required_args if arg not in args]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def format_missing_args(missing: list[str]) -> str:
    """Human-readable error for missing arguments.

    >>> format_missing_args(["a", "b", "c"])
    "Expected 'a', 'b', and 'c' in args"
    """
    quoted = [f"'{arg}'" for arg in missing]
    if len(quoted) == 1:
        names = quoted[0]
    elif len(quoted) == 2:
        names = f"{quoted[0]} and {quoted[1]}"
    else:
        names = ", ".join(quoted[:-1]) + f", and {quoted[-1]}"
    return f"Expected {names} in args"


# Fire-and-forget handlers

def _sleep(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.sleep(args["msec"])


def _listen(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    def on_text(text: str) -> None:
        ctx.on_listen_text(text.strip())

    return ctx.actuator.listen(on_text)


def _pause_listening(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.pause_listening()


def _resume_listening(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.resume_listening()


def _stop_listening(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.stop_listening()


def _shine(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.shine(args["color"])


def _pulse(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.pulse(args["color"], clamp_pulse_duration(args["duration"]))


def _arm_back(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.arm_back()


def _raise_arm(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.raise_arm()


def _lower_arm(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.lower_arm()


def _wave(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.wave()


# Request handlers

def _analyze_tone(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.analyze_tone(args["text"])


def _converse(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.converse(args["workspaceId"], args["message"])


async def _capture_and_recognize(
        ctx: HandlerContext,
        recognize: Callable[[str], Any],
) -> dict[str, Any]:
    ctx.config.ensure_photo_dir()
    path = str(ctx.config.photo_path)
    await _resolve(ctx.actuator.take_photo(path))
    objects = await _resolve(recognize(path))
    return {"objects": objects, "imageURL": ctx.config.image_url}


async def _see(ctx: HandlerContext, args: Mapping[str, Any]) -> dict[str, Any]:
    return await _capture_and_recognize(ctx, ctx.actuator.recognize_objects_in_photo)


async def _read(ctx: HandlerContext, args: Mapping[str, Any]) -> dict[str, Any]:
    return await _capture_and_recognize(ctx, ctx.actuator.recognize_text_in_photo)


def _shine_colors(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.shine_colors()


def _random_color(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.random_color()


async def _speak(ctx: HandlerContext, args: Mapping[str, Any]) -> dict[str, Any]:
    message = args["message"]
    await _resolve(ctx.actuator.speak(message))
    return {"message": message}


async def _play(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    sound_file = args["soundFile"]
    await _resolve(ctx.actuator.play(sound_file))
    return sound_file


def _translate(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.translate(args["text"], args["sourceLanguage"], args["targetLanguage"])


async def _identify_language(ctx: HandlerContext, args: Mapping[str, Any]) -> dict[str, Any]:
    result = await _resolve(ctx.actuator.identify_language(args["text"]))
    languages = result.get("languages", []) if isinstance(result, Mapping) else result
    return {"languages": list(languages)[:MAX_IDENTIFIED_LANGUAGES]}


def _is_translatable(ctx: HandlerContext, args: Mapping[str, Any]) -> Any:
    return ctx.actuator.is_translatable(args["sourceLanguage"], args["targetLanguage"])


def _descriptor(
        name: CommandName,
        channel: Channel,
        invoke: Handler,
        *required_args: str,
) -> HandlerDescriptor:
    return HandlerDescriptor(name=name, channel=channel, required_args=required_args, invoke=invoke)


_FIRE = Channel.FIRE_AND_FORGET
_REQ = Channel.REQUEST

_DESCRIPTORS: Final[tuple[HandlerDescriptor, ...]] = (
    _descriptor(CommandName.SLEEP, _FIRE, _sleep, "msec"),
    _descriptor(CommandName.LISTEN, _FIRE, _listen),
    _descriptor(CommandName.PAUSE_LISTENING, _FIRE, _pause_listening),
    _descriptor(CommandName.RESUME_LISTENING, _FIRE, _resume_listening),
    _descriptor(CommandName.STOP_LISTENING, _FIRE, _stop_listening),
    _descriptor(CommandName.SHINE, _FIRE, _shine, "color"),
    _descriptor(CommandName.PULSE, _FIRE, _pulse, "color", "duration"),
    _descriptor(CommandName.ARM_BACK, _FIRE, _arm_back),
    _descriptor(CommandName.RAISE_ARM, _FIRE, _raise_arm),
    _descriptor(CommandName.LOWER_ARM, _FIRE, _lower_arm),
    _descriptor(CommandName.WAVE, _FIRE, _wave),
    _descriptor(CommandName.ANALYZE_TONE, _REQ, _analyze_tone, "text"),
    _descriptor(CommandName.CONVERSE, _REQ, _converse, "workspaceId", "message"),
    _descriptor(CommandName.SEE, _REQ, _see),
    _descriptor(CommandName.READ, _REQ, _read),
    _descriptor(CommandName.SHINE_COLORS, _REQ, _shine_colors),
    _descriptor(CommandName.RANDOM_COLOR, _REQ, _random_color),
    _descriptor(CommandName.SPEAK, _REQ, _speak, "message"),
    _descriptor(CommandName.PLAY, _REQ, _play, "soundFile"),
    _descriptor(CommandName.TRANSLATE, _REQ, _translate, "text", "sourceLanguage", "targetLanguage"),
    _descriptor(CommandName.IDENTIFY_LANGUAGE, _REQ, _identify_language, "text"),
    _descriptor(CommandName.IS_TRANSLATABLE, _REQ, _is_translatable, "sourceLanguage", "targetLanguage"),
)

COMMAND_HANDLERS: Final[dict[Channel, dict[str, HandlerDescriptor]]] = {
    channel: {d.name.value: d for d in _DESCRIPTORS if d.channel is channel}
    for channel in Channel
}


def get_handler(channel: Channel, name: str) -> HandlerDescriptor | None:
    """Look up the handler for a command name on a channel, if registered."""
    return COMMAND_HANDLERS[channel].get(name)


async def invoke_handler(
        descriptor: HandlerDescriptor,
        ctx: HandlerContext,
        args: Mapping[str, Any],
) -> Any:
    """Run a handler and wait for its result, whatever kind it returns."""
    return await _resolve(descriptor.invoke(ctx, args))
