"""Blocking decode-and-display loop."""

import logging
from pathlib import Path

from ..media.models import PlaybackResult
from .base import PlaybackBackend

logger = logging.getLogger(__name__)


class VideoPlayer:
    """Plays a local media file through a playback backend.

    Provides a single blocking play() call; the only suspension point is
    the bounded wait for the cancel signal between frames.
    """

    def __init__(self, backend: PlaybackBackend, frame_interval_ms: int = 33) -> None:
        """Initialize the player.

        Args:
            backend: Decode/display backend
            frame_interval_ms: Time each frame stays on screen, also the
                cancel polling window
        """
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        self.backend = backend
        self.frame_interval_ms = frame_interval_ms

    def play(self, path: Path) -> PlaybackResult:
        """Play a file until end of stream or cancellation.

        Args:
            path: Local media file

        Returns:
            PlaybackResult.COMPLETED at end of stream,
            PlaybackResult.CANCELLED if the cancel signal arrived

        Raises:
            DecodeUnavailableError: If the file cannot be opened for decoding
            RuntimeError: If the display cannot be created
        """
        frames = 0
        try:
            self.backend.open(path)
            self.backend.open_display()

            while True:
                frame = self.backend.read_frame()
                if frame is None:
                    result = PlaybackResult.COMPLETED
                    break

                self.backend.render(frame)
                frames += 1

                if self.backend.poll_cancel(self.frame_interval_ms):
                    result = PlaybackResult.CANCELLED
                    break
        finally:
            self.backend.close()

        logger.debug(f"Playback of {path.name} {result.value} after {frames} frames")
        return result
