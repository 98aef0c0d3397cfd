"""JSON serialization/deserialization for service configuration."""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from pathlib import Path

from ..exceptions import ConfigParseError
from .config import ServiceConfig


def _parse_int(value: str | int) -> int:
    """Parse integer from string (handles "0x" hex or decimal)."""
    if isinstance(value, bool):
        raise ValueError(f"expected integer, got {value!r}")
    if isinstance(value, int):
        return value
    value = str(value).strip()
    if value.startswith("0x") or value.startswith("0X"):
        return int(value, 16)
    return int(value)


def _parse_bool(value: str | bool | int) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"expected boolean, got {value!r}")


def config_to_json(config: ServiceConfig) -> dict:
    """Export ServiceConfig to a JSON-serializable dict."""
    return asdict(config)


def config_from_json(data: dict) -> ServiceConfig:
    """Build a ServiceConfig from a dict produced by config_to_json.

    Unknown keys are rejected so typos do not silently fall back to defaults.

    Raises:
        ConfigParseError: If a key is unknown or a value cannot be parsed
    """
    if not isinstance(data, dict):
        raise ConfigParseError(f"Expected JSON object, got {type(data).__name__}")

    known = {f.name for f in fields(ServiceConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigParseError(f"Unknown config keys: {', '.join(unknown)}")

    kwargs: dict = {}
    try:
        if "name" in data:
            kwargs["name"] = str(data["name"])
        if "photo_dir" in data:
            kwargs["photo_dir"] = str(data["photo_dir"])
        if "photo_port" in data:
            kwargs["photo_port"] = _parse_int(data["photo_port"])
        if "photo_filename" in data:
            kwargs["photo_filename"] = str(data["photo_filename"])
        if "always_ack_requests" in data:
            kwargs["always_ack_requests"] = _parse_bool(data["always_ack_requests"])
    except ValueError as e:
        raise ConfigParseError(f"Invalid config value: {e}") from e

    return ServiceConfig(**kwargs)


def load_config(path: str | Path) -> ServiceConfig:
    """Read a ServiceConfig from a JSON file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Config file {path} is not valid JSON: {e}") from e
    return config_from_json(data)
