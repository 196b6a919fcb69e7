"""Local media directory lookup."""

import logging
import stat
from pathlib import Path

from .errors import DirectoryUnavailableError, InvalidInputError

logger = logging.getLogger(__name__)

# Names that would escape or alias the media directory itself
_RESERVED_KEYS = frozenset({"", ".", ".."})


def derive_cache_key(url: str) -> str:
    """Return the file name a URL is cached under.

    The key is everything after the last '/', or the whole string when
    there is no '/'. An empty input yields an empty key.

    Example:
        derive_cache_key("http://x.com/dir/clip.mp4") -> "clip.mp4"
        derive_cache_key("clip.mp4") -> "clip.mp4"
    """
    return url.rsplit("/", 1)[-1]


def validate_key(key: str) -> str:
    """Check that a cache key names a file directly inside the media dir.

    Raises:
        InvalidInputError: If the key is empty, '.', '..' or holds a NUL byte
    """
    if key in _RESERVED_KEYS or "\0" in key:
        raise InvalidInputError(f"Invalid url, no file name: {key!r}")
    return key


class MediaCache:
    """Media directory where each file is named after its cache key.

    Existence is the only metadata: no invalidation, sizes or hashes.
    """

    def __init__(self, media_dir: Path) -> None:
        """Initialize cache over an existing directory.

        Args:
            media_dir: Directory holding cached media files
        """
        self.media_dir = media_dir

    def path_for(self, key: str) -> Path:
        """Local path a cache key is stored at."""
        return self.media_dir / key

    def resolve_local(self, key: str) -> bool:
        """Check whether a file named exactly `key` is already cached.

        Args:
            key: Cache key from derive_cache_key()

        Returns:
            True if the file exists, False otherwise

        Raises:
            DirectoryUnavailableError: If the media directory cannot be opened
        """
        try:
            mode = self.media_dir.stat().st_mode
        except OSError as e:
            raise DirectoryUnavailableError(
                f"Unable to open media directory {self.media_dir}: {e}", e
            ) from e

        if not stat.S_ISDIR(mode):
            raise DirectoryUnavailableError(
                f"Media path is not a directory: {self.media_dir}"
            )

        exists = self.path_for(key).is_file()
        if exists:
            logger.info(f"{key} already exists")
        return exists
