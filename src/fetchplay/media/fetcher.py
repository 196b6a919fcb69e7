"""HTTP download of media files into the media directory."""

import logging
import os
from pathlib import Path

import httpx

from .errors import FetchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 256 * 1024
TEMP_SUFFIX = ".tmp"


class MediaFetcher:
    """Downloads a URL to a local file in a single best-effort attempt.

    The body is streamed to a temporary sibling file and moved into place
    only after the transfer succeeded, so the destination never holds a
    partial download. No retries, no resume, no checksum.
    """

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None) -> None:
        """Initialize fetcher.

        Args:
            timeout: Network timeout in seconds
            client: Optional pre-built httpx client (tests inject a MockTransport)
        """
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(follow_redirects=True, timeout=self.timeout)
        return self._client

    def fetch(self, url: str, destination: Path) -> int:
        """Download `url` to `destination`, following redirects.

        Args:
            url: Resource to GET
            destination: Final path of the downloaded file

        Returns:
            Number of body bytes written

        Raises:
            FetchError: On non-2xx status, transport error, short body, or
                write failure. The destination is absent afterwards.
        """
        tmp_path = destination.with_name(destination.name + TEMP_SUFFIX)
        logger.info(f"Downloading {url}")

        try:
            with self.client.stream("GET", url, follow_redirects=True) as response:
                if not response.is_success:
                    raise FetchError(
                        f"HTTP {response.status_code} for {url}",
                        status_code=response.status_code,
                    )

                bytes_written = 0
                with open(tmp_path, "wb") as fh:
                    for chunk in response.iter_bytes(chunk_size=CHUNK_SIZE):
                        fh.write(chunk)
                        bytes_written += len(chunk)

                # Content-Length counts encoded bytes, compare against the wire
                content_length = response.headers.get("Content-Length", "")
                if (
                    content_length.isdigit()
                    and response.num_bytes_downloaded < int(content_length)
                ):
                    raise FetchError(
                        f"Incomplete download ({response.num_bytes_downloaded}"
                        f"/{content_length} bytes) for {url}",
                        status_code=response.status_code,
                    )

            os.replace(tmp_path, destination)

        except FetchError:
            self._discard(tmp_path)
            raise
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._discard(tmp_path)
            raise FetchError(f"Transfer failed for {url}: {e}", None, e) from e
        except OSError as e:
            self._discard(tmp_path)
            raise FetchError(f"Failed to write {destination}: {e}", None, e) from e

        logger.info(f"{destination.name} downloaded successfully ({bytes_written} bytes)")
        return bytes_written

    def _discard(self, path: Path) -> None:
        """Remove an incomplete download."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove incomplete file {path}: {e}")

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "MediaFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
