"""Full-screen video display using pygame."""

# ruff: noqa: E402
import os

# Suppress pygame's annoying welcome message BEFORE any pygame import
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import warnings

# Suppress pygame's pkg_resources deprecation warning spam
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import cv2
import numpy as np
import pygame

from .base import CaptureBackend

WINDOW_TITLE = "Video"


def key_code(name: str) -> int:
    """Translate a key name ("escape", "space", "q", "f1") into a pygame key constant.

    Raises:
        ValueError: If pygame has no K_ constant for the name
    """
    for attr in (f"K_{name.lower()}", f"K_{name.upper()}"):
        code = getattr(pygame, attr, None)
        if isinstance(code, int):
            return code
    raise ValueError(f"Unknown cancel key: {name!r}")


def fit_size(frame_size: tuple[int, int], screen_size: tuple[int, int]) -> tuple[int, int]:
    """Scale a frame to fit the screen while keeping its aspect ratio.

    Args:
        frame_size: (width, height) of the decoded frame
        screen_size: (width, height) of the display surface

    Returns:
        (width, height) of the scaled frame
    """
    frame_w, frame_h = frame_size
    screen_w, screen_h = screen_size
    if frame_w <= 0 or frame_h <= 0:
        return screen_size
    scale = min(screen_w / frame_w, screen_h / frame_h)
    return max(1, round(frame_w * scale)), max(1, round(frame_h * scale))


class PygameBackend(CaptureBackend):
    """Decodes with OpenCV and presents frames on a pygame display.

    Frames are letterboxed to the screen. The cancel key (Escape by
    default) or closing the window stops playback.
    """

    def __init__(self, cancel_key: str = "escape", fullscreen: bool = True) -> None:
        """Initialize backend without touching the display yet.

        Args:
            cancel_key: pygame key name that stops playback
            fullscreen: Use a full-screen surface instead of a window

        Raises:
            ValueError: If the cancel key name is not a pygame key
        """
        super().__init__()
        self.cancel_key = cancel_key
        self._cancel_code = key_code(cancel_key)
        self.fullscreen = fullscreen
        self.screen: pygame.Surface | None = None

    def open_display(self) -> None:
        try:
            pygame.display.init()
            if self.fullscreen:
                self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
            else:
                self.screen = pygame.display.set_mode((1280, 720), pygame.RESIZABLE)
            pygame.display.set_caption(WINDOW_TITLE)
        except pygame.error as e:
            raise RuntimeError(f"Failed to initialize pygame display: {e}") from e

    def render(self, frame: np.ndarray) -> None:
        if self.screen is None:
            raise RuntimeError("Display not opened")

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        # surfarray expects (width, height, channels)
        surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))

        screen_size = self.screen.get_size()
        target = fit_size(surface.get_size(), screen_size)
        if target != surface.get_size():
            surface = pygame.transform.smoothscale(surface, target)

        self.screen.fill((0, 0, 0))
        self.screen.blit(
            surface,
            ((screen_size[0] - target[0]) // 2, (screen_size[1] - target[1]) // 2),
        )
        pygame.display.flip()

    def poll_cancel(self, timeout_ms: int) -> bool:
        deadline = pygame.time.get_ticks() + timeout_ms
        while True:
            remaining = deadline - pygame.time.get_ticks()
            if remaining <= 0:
                return False
            event = pygame.event.wait(remaining)
            if event.type == pygame.QUIT:
                return True
            if event.type == pygame.KEYDOWN and event.key == self._cancel_code:
                return True

    def close_display(self) -> None:
        if self.screen is not None:
            self.screen = None
            pygame.display.quit()
