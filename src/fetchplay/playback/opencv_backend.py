"""Full-screen video display using OpenCV HighGUI."""

import cv2
import numpy as np

from .base import CaptureBackend

WINDOW_NAME = "Video"

# HighGUI reports key presses as character codes
KEY_CODES = {
    "escape": 27,
    "space": 32,
    "return": 13,
    "tab": 9,
}


def key_code(name: str) -> int:
    """Translate a key name into the code cv2.waitKey() reports.

    Raises:
        ValueError: If the name is neither a known key nor a single character
    """
    lowered = name.lower()
    if lowered in KEY_CODES:
        return KEY_CODES[lowered]
    if len(name) == 1:
        return ord(name)
    raise ValueError(f"Unknown cancel key: {name!r}")


class OpenCVBackend(CaptureBackend):
    """Decodes and displays with OpenCV alone."""

    def __init__(self, cancel_key: str = "escape", fullscreen: bool = True) -> None:
        super().__init__()
        self.cancel_code = key_code(cancel_key)
        self.fullscreen = fullscreen
        self.window_open = False

    def open_display(self) -> None:
        try:
            cv2.startWindowThread()
            cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
            if self.fullscreen:
                cv2.setWindowProperty(
                    WINDOW_NAME, cv2.WND_PROP_FULLSCREEN, cv2.WINDOW_FULLSCREEN
                )
        except cv2.error as e:
            raise RuntimeError(f"Failed to create OpenCV window: {e}") from e
        self.window_open = True

    def render(self, frame: np.ndarray) -> None:
        cv2.imshow(WINDOW_NAME, frame)

    def poll_cancel(self, timeout_ms: int) -> bool:
        key = cv2.waitKey(timeout_ms)
        return key != -1 and (key & 0xFF) == self.cancel_code

    def close_display(self) -> None:
        if self.window_open:
            cv2.destroyWindow(WINDOW_NAME)
            self.window_open = False
