"""Fetch-or-play pipeline for fetchplay.

Coordinates MediaCache, MediaFetcher, and VideoPlayer so one URL line
becomes a cached file on disk and a full-screen playback.
"""

import logging

from ..config import FetchPlayConfig
from ..playback import BackendRegistry, VideoPlayer
from .cache import MediaCache, validate_key
from .errors import (
    DecodeUnavailableError,
    DirectoryUnavailableError,
    FetchError,
    InvalidInputError,
)
from .fetcher import MediaFetcher
from .models import Outcome, PlaybackResult, Request, RequestOutcome

logger = logging.getLogger(__name__)


class MediaPipeline:
    """Orchestrates the complete request workflow from URL to playback.

    Every request ends in exactly one of four branches: invalid input,
    media directory unavailable, download failed, or playback (completed,
    cancelled, or source not decodable). None of them is fatal; the caller
    moves on to the next line.

    Example:
        pipeline = MediaPipeline.from_config(load_config())
        outcome = pipeline.handle_request("http://host/videos/clip.mp4\\n")
        # outcome.outcome is Outcome.COMPLETED, outcome.downloaded is True
    """

    def __init__(
        self, cache: MediaCache, fetcher: MediaFetcher, player: VideoPlayer
    ) -> None:
        """Initialize pipeline with its collaborators.

        Args:
            cache: Media directory lookup
            fetcher: HTTP downloader
            player: Playback loop bound to a display backend
        """
        self.cache = cache
        self.fetcher = fetcher
        self.player = player

    @classmethod
    def from_config(cls, config: FetchPlayConfig) -> "MediaPipeline":
        """Build a pipeline from configuration.

        Raises:
            KeyError: If the configured backend is not registered
            ValueError: If the cancel key is not recognised by the backend
        """
        backend_class = BackendRegistry.get(config.playback.backend)
        backend = backend_class(
            cancel_key=config.playback.cancel_key,
            fullscreen=config.playback.fullscreen,
        )
        return cls(
            cache=MediaCache(config.media.directory),
            fetcher=MediaFetcher(timeout=config.fetch.timeout),
            player=VideoPlayer(backend, config.playback.frame_interval_ms),
        )

    def handle_request(self, line: str) -> RequestOutcome:
        """Process one URL line from a client.

        Args:
            line: Raw line, with or without its trailing newline

        Returns:
            RequestOutcome describing which branch the request took

        Raises:
            RuntimeError: If the display backend cannot be initialised
        """
        request = Request(line)
        url = request.url
        key = request.key

        logger.info(f"URL: {url}")
        logger.info(f"File: {key}")

        try:
            validate_key(key)
        except InvalidInputError as e:
            logger.warning(str(e))
            return RequestOutcome(Outcome.INVALID, url, key, error=str(e))

        path = self.cache.path_for(key)
        downloaded = False

        # === CACHE LOOKUP PHASE ===
        try:
            exists = self.cache.resolve_local(key)
        except DirectoryUnavailableError as e:
            logger.error(f"Error! {e}")
            return RequestOutcome(
                Outcome.DIRECTORY_UNAVAILABLE, url, key, path, error=str(e)
            )

        # === FETCH PHASE ===
        if not exists:
            logger.info("Video does not exist. Downloading...")
            try:
                self.fetcher.fetch(url, path)
                downloaded = True
            except FetchError as e:
                logger.error(f"Error: {e}")
                return RequestOutcome(Outcome.FETCH_FAILED, url, key, path, error=str(e))

        # === PLAYBACK PHASE ===
        try:
            result = self.player.play(path)
        except DecodeUnavailableError as e:
            logger.error(str(e))
            return RequestOutcome(
                Outcome.DECODE_UNAVAILABLE, url, key, path, downloaded, error=str(e)
            )

        if result is PlaybackResult.CANCELLED:
            logger.info(f"Playback of {key} cancelled")
            return RequestOutcome(Outcome.CANCELLED, url, key, path, downloaded)

        logger.info(f"Playback of {key} finished")
        return RequestOutcome(Outcome.COMPLETED, url, key, path, downloaded)

    def close(self) -> None:
        """Release the HTTP client."""
        self.fetcher.close()
