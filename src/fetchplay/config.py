"""Configuration management for fetchplay.

Loads configuration from $XDG_CONFIG_HOME/fetchplay/config.toml.
Priority chain: CLI flags > env vars > config file > defaults.
"""

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .paths import get_config_dir, get_default_media_dir

CONFIG_FILENAME = "config.toml"

DEFAULT_CONFIG = """\
# fetchplay configuration

[server]
# Bind address: "0.0.0.0" = all interfaces, "127.0.0.1" = localhost only
host = "0.0.0.0"

# Pending connections queued while a client is being served
backlog = 5

# Longest accepted URL line in bytes; longer lines end the session
max_line = 1000

[media]
# Directory holding downloaded media files (defaults to the XDG cache dir)
# directory = "~/.cache/fetchplay/media"

[fetch]
# Seconds to wait on the network before a download fails
timeout = 30.0

[playback]
# Display backend: "pygame" or "opencv"
backend = "pygame"

# Delay between frames, also the cancel-key polling window
frame_interval_ms = 33

# Key that stops the current video ("escape", "space", "q", ...)
cancel_key = "escape"

fullscreen = true
"""


@dataclass(frozen=True)
class ServerConfig:
    """TCP listener configuration."""

    host: str = "0.0.0.0"
    port: int = 0
    backlog: int = 5
    max_line: int = 1000


@dataclass(frozen=True)
class MediaConfig:
    """Media directory configuration."""

    directory: Path


@dataclass(frozen=True)
class FetchConfig:
    """HTTP download configuration."""

    timeout: float = 30.0


@dataclass(frozen=True)
class PlaybackConfig:
    """Playback backend configuration."""

    backend: str = "pygame"
    frame_interval_ms: int = 33
    cancel_key: str = "escape"
    fullscreen: bool = True


@dataclass(frozen=True)
class FetchPlayConfig:
    """Top-level fetchplay configuration."""

    server: ServerConfig
    media: MediaConfig
    fetch: FetchConfig
    playback: PlaybackConfig

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if not 0 <= self.server.port <= 65535:
            raise ValueError(f"port must be between 0 and 65535, got {self.server.port}")
        if self.server.backlog <= 0:
            raise ValueError("backlog must be positive")
        if self.server.max_line <= 0:
            raise ValueError("max_line must be positive")
        if self.fetch.timeout <= 0:
            raise ValueError("fetch timeout must be positive")
        if self.playback.frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        if not isinstance(self.playback.fullscreen, bool):
            raise ValueError(
                f"fullscreen must be true or false, got {self.playback.fullscreen!r}"
            )

    def with_overrides(
        self,
        port: int | None = None,
        host: str | None = None,
        media_dir: Path | None = None,
        backend: str | None = None,
    ) -> "FetchPlayConfig":
        """Return a copy with CLI-level overrides applied."""
        server = self.server
        if port is not None:
            server = replace(server, port=port)
        if host is not None:
            server = replace(server, host=host)
        media = self.media if media_dir is None else MediaConfig(directory=media_dir)
        playback = (
            self.playback if backend is None else replace(self.playback, backend=backend)
        )
        return replace(self, server=server, media=media, playback=playback)


def get_config_path() -> Path:
    """Path of the user config file."""
    return get_config_dir() / CONFIG_FILENAME


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file.

    Args:
        path: Destination, defaults to the XDG config location

    Returns:
        Path the file was written to
    """
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def default_config() -> FetchPlayConfig:
    """Configuration used when no file and no env vars are present."""
    return FetchPlayConfig(
        server=ServerConfig(),
        media=MediaConfig(directory=get_default_media_dir()),
        fetch=FetchConfig(),
        playback=PlaybackConfig(),
    )


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table, got {section!r}")
    return section


def _number(value: object, kind: type[int] | type[float], name: str) -> int | float:
    """Convert a config value to int or float, reporting the offending key."""
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def _string(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def load_config(path: Path | None = None) -> FetchPlayConfig:
    """Load configuration from config file with env var overrides.

    A missing config file is not an error: defaults apply so the server
    can start from just a port number.

    Args:
        path: Config file to read, defaults to the XDG config location

    Returns:
        Loaded and validated FetchPlayConfig.

    Raises:
        tomllib.TOMLDecodeError: If the config file is not valid TOML.
        ValueError: If a value has the wrong type or is out of range.
    """
    path = path or get_config_path()
    data: dict = {}
    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

    server = _section(data, "server")
    media = _section(data, "media")
    fetch = _section(data, "fetch")
    playback = _section(data, "playback")

    # Env vars override config file values
    media_dir = os.getenv("FETCHPLAY_MEDIA_DIR", media.get("directory"))
    timeout = os.getenv("FETCHPLAY_FETCH_TIMEOUT", fetch.get("timeout", 30.0))

    return FetchPlayConfig(
        server=ServerConfig(
            host=_string(
                os.getenv("FETCHPLAY_HOST", server.get("host", "0.0.0.0")), "host"
            ),
            backlog=_number(server.get("backlog", 5), int, "backlog"),
            max_line=_number(server.get("max_line", 1000), int, "max_line"),
        ),
        media=MediaConfig(
            directory=Path(_string(media_dir, "media directory")).expanduser()
            if media_dir
            else get_default_media_dir(),
        ),
        fetch=FetchConfig(timeout=_number(timeout, float, "fetch timeout")),
        playback=PlaybackConfig(
            backend=_string(
                os.getenv("FETCHPLAY_BACKEND", playback.get("backend", "pygame")),
                "backend",
            ),
            frame_interval_ms=_number(
                playback.get("frame_interval_ms", 33), int, "frame_interval_ms"
            ),
            cancel_key=_string(playback.get("cancel_key", "escape"), "cancel_key"),
            fullscreen=playback.get("fullscreen", True),
        ),
    )
