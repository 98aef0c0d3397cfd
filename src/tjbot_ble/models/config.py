"""Service configuration model."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from pathlib import Path

from ..exceptions import ConfigParseError

MAX_NAME_BYTES = 26  # BLE local name limit used when advertising


def default_name() -> str:
    """Host name truncated to the advertised name limit."""
    return truncate_name(socket.gethostname())


def truncate_name(name: str) -> str:
    encoded = name.encode("utf-8")[:MAX_NAME_BYTES]
    return encoded.decode("utf-8", errors="ignore")


@dataclass(frozen=True)
class ServiceConfig:
    """Settings for the command service on the robot.

    Attributes:
        name: Advertised robot name, also used as the photo host name
        photo_dir: Directory captured photos are written to
        photo_port: Port of the HTTP server that serves photo_dir
        photo_filename: File name used for captured photos
        always_ack_requests: Acknowledge request-channel writes naming an
            unknown command or missing args (errors are still sent as
            replies). Undecodable frames are always acknowledged negatively.
    """

    name: str = ""
    photo_dir: str = "/tmp/tjbot-photo/"
    photo_port: int = 9080
    photo_filename: str = "photo.jpg"
    always_ack_requests: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", default_name() or "tjbot")
        elif len(self.name.encode("utf-8")) > MAX_NAME_BYTES:
            raise ConfigParseError(
                f"name too long: {len(self.name.encode('utf-8'))} bytes "
                f"(max {MAX_NAME_BYTES})"
            )
        if not 0 < self.photo_port <= 0xFFFF:
            raise ConfigParseError(f"photo_port out of range: {self.photo_port}")
        if not self.photo_filename or "/" in self.photo_filename:
            raise ConfigParseError(f"invalid photo_filename: {self.photo_filename!r}")

    @property
    def photo_path(self) -> Path:
        """Where the actuator should save a captured photo."""
        return Path(self.photo_dir) / self.photo_filename

    @property
    def image_url(self) -> str:
        """URL the remote client can fetch the captured photo from."""
        return f"http://{self.name.lower()}.local:{self.photo_port}/{self.photo_filename}"

    def ensure_photo_dir(self) -> Path:
        """Create the photo directory if needed and return it."""
        path = Path(self.photo_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path
