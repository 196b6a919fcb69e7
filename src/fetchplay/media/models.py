"""Data models for media requests."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .cache import derive_cache_key


class PlaybackResult(Enum):
    """How a playback loop ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Outcome(Enum):
    """Terminal outcome of a single request."""

    INVALID = "invalid"
    DIRECTORY_UNAVAILABLE = "directory_unavailable"
    FETCH_FAILED = "fetch_failed"
    DECODE_UNAVAILABLE = "decode_unavailable"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def played(self) -> bool:
        return self in (Outcome.COMPLETED, Outcome.CANCELLED)


@dataclass(frozen=True)
class Request:
    """A single URL line received from a client.

    Attributes:
        raw: Line as received, possibly including its terminator
    """

    raw: str

    @property
    def url(self) -> str:
        """The line with its trailing newline (and carriage return) removed."""
        return self.raw.rstrip("\n").rstrip("\r")

    @property
    def key(self) -> str:
        return derive_cache_key(self.url)


@dataclass
class RequestOutcome:
    """Result of handling one request.

    Attributes:
        outcome: Which terminal branch the request took
        url: URL with line terminator removed
        key: Derived cache key (may be empty for invalid input)
        path: Local media file path, None for invalid input
        downloaded: True if the file was fetched during this request
        error: Error message for failed outcomes
    """

    outcome: Outcome
    url: str
    key: str
    path: Path | None = None
    downloaded: bool = False
    error: str | None = None
