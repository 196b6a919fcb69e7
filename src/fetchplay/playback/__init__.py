"""Playback backends for decoding and displaying video.

This module provides a registry pattern for managing display backends,
allowing runtime selection between pygame and OpenCV windows.
"""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .base import PlaybackBackend

from .opencv_backend import OpenCVBackend
from .player import VideoPlayer
from .pygame_backend import PygameBackend

__all__ = ["BackendRegistry", "VideoPlayer"]


class BackendRegistry:
    """Registry for managing playback backends.

    This class maintains a registry of available backends,
    allowing registration and retrieval by name.
    """

    _backends: ClassVar[dict[str, type["PlaybackBackend"]]] = {}

    @classmethod
    def register(cls, name: str, backend_class: type["PlaybackBackend"]) -> None:
        """Register a playback backend.

        Args:
            name: Name to register the backend under
            backend_class: Class implementing PlaybackBackend
        """
        cls._backends[name] = backend_class

    @classmethod
    def get(cls, name: str) -> type["PlaybackBackend"]:
        """Get a backend class by name.

        Raises:
            KeyError: If backend name not found
        """
        if name not in cls._backends:
            available = ", ".join(cls._backends.keys()) if cls._backends else "none"
            raise KeyError(
                f"Backend '{name}' not found. Available backends: {available}"
            )
        return cls._backends[name]

    @classmethod
    def names(cls) -> list[str]:
        return list(cls._backends)


# Register backends
BackendRegistry.register("pygame", PygameBackend)
BackendRegistry.register("opencv", OpenCVBackend)
