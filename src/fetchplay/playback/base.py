"""Abstract base classes for playback backends.

This module defines the interface that all playback backends must implement,
so the playback loop can run against a real display or a headless test double.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import cv2
import numpy as np

from ..media.errors import DecodeUnavailableError


class PlaybackBackend(ABC):
    """Abstract base class for decode-and-display backends.

    The playback loop calls these in order:
        open(path) -> open_display() -> [read_frame() -> render() ->
        poll_cancel()]* -> close()

    close() must be safe to call after a failed open().
    """

    @abstractmethod
    def open(self, path: Path) -> None:
        """Open a media file for decoding.

        Raises:
            DecodeUnavailableError: If the file cannot be decoded
        """
        pass

    @abstractmethod
    def open_display(self) -> None:
        """Create the (full-screen) display surface.

        Raises:
            RuntimeError: If the display cannot be created
        """
        pass

    @abstractmethod
    def read_frame(self) -> np.ndarray | None:
        """Decode the next frame, None at end of stream."""
        pass

    @abstractmethod
    def render(self, frame: np.ndarray) -> None:
        """Present a decoded frame."""
        pass

    @abstractmethod
    def poll_cancel(self, timeout_ms: int) -> bool:
        """Wait up to `timeout_ms` for the cancel signal.

        Returns:
            True if playback should stop
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release decoder and display resources."""
        pass


class CaptureBackend(PlaybackBackend):
    """Backend base that decodes with OpenCV's VideoCapture.

    Subclasses only provide the display half (open_display, render,
    poll_cancel, close_display).
    """

    def __init__(self) -> None:
        self.capture: cv2.VideoCapture | None = None

    def open(self, path: Path) -> None:
        capture = cv2.VideoCapture(str(path))
        if not capture.isOpened():
            capture.release()
            raise DecodeUnavailableError(f"Video file could not be opened: {path}")
        self.capture = capture

    def read_frame(self) -> np.ndarray | None:
        if self.capture is None:
            return None
        ok, frame = self.capture.read()
        if not ok:
            return None
        return frame

    def close(self) -> None:
        if self.capture is not None:
            self.capture.release()
            self.capture = None
        self.close_display()

    @abstractmethod
    def close_display(self) -> None:
        """Tear down the display surface if it was opened."""
        pass
