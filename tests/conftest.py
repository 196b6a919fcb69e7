"""Pytest configuration and fixtures for fetchplay tests."""

import sys
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fetchplay.media.errors import DecodeUnavailableError
from fetchplay.playback.base import PlaybackBackend


class FakeBackend(PlaybackBackend):
    """Headless backend yielding a fixed frame sequence and scripted cancel."""

    def __init__(
        self, frames: int = 3, cancel_after: int | None = None, openable: bool = True
    ) -> None:
        self.frames = frames
        self.cancel_after = cancel_after
        self.openable = openable
        self.calls: list[str] = []
        self.opened: list[Path] = []
        self.rendered = 0
        self.poll_timeouts: list[int] = []
        self._remaining = 0

    def open(self, path: Path) -> None:
        self.calls.append("open")
        self.opened.append(path)
        if not self.openable:
            raise DecodeUnavailableError(f"Video file could not be opened: {path}")
        self._remaining = self.frames

    def open_display(self) -> None:
        self.calls.append("open_display")

    def read_frame(self) -> np.ndarray | None:
        if self._remaining <= 0:
            return None
        self._remaining -= 1
        return np.zeros((4, 6, 3), dtype=np.uint8)

    def render(self, frame: np.ndarray) -> None:
        self.rendered += 1

    def poll_cancel(self, timeout_ms: int) -> bool:
        self.poll_timeouts.append(timeout_ms)
        return self.cancel_after is not None and self.rendered >= self.cancel_after

    def close(self) -> None:
        self.calls.append("close")


@pytest.fixture(autouse=True)
def isolate_xdg_dirs(monkeypatch, tmp_path) -> None:
    """Point XDG directories at a per-test location and clear env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for name in (
        "FETCHPLAY_HOST",
        "FETCHPLAY_MEDIA_DIR",
        "FETCHPLAY_BACKEND",
        "FETCHPLAY_FETCH_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def media_dir(tmp_path) -> Path:
    """Empty, existing media directory."""
    path = tmp_path / "media"
    path.mkdir()
    return path


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    """Factory for scripted fake playback backends."""
    return FakeBackend
