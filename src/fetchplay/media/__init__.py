"""Media request handling for fetchplay.

This package derives cache keys, looks up and downloads media files. The
fetch-or-play orchestration lives in fetchplay.media.pipeline.
"""

from .cache import MediaCache, derive_cache_key
from .errors import (
    DecodeUnavailableError,
    DirectoryUnavailableError,
    FetchError,
    InvalidInputError,
    MediaError,
)
from .fetcher import MediaFetcher
from .models import Outcome, PlaybackResult, Request, RequestOutcome

__all__ = [
    "DecodeUnavailableError",
    "DirectoryUnavailableError",
    "FetchError",
    "InvalidInputError",
    "MediaCache",
    "MediaError",
    "MediaFetcher",
    "Outcome",
    "PlaybackResult",
    "Request",
    "RequestOutcome",
    "derive_cache_key",
]
