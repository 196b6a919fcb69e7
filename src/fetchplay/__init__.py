"""fetchplay - TCP-driven download-and-play media server."""

__version__ = "0.1.0"
__all__ = ["MediaPipeline"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "MediaPipeline":
        from .media.pipeline import MediaPipeline

        return MediaPipeline
    raise AttributeError(f"module 'fetchplay' has no attribute {name!r}")
