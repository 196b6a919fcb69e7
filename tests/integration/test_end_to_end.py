"""End-to-end tests: TCP client -> server -> pipeline -> fetch -> playback."""

import asyncio
import contextlib
import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from fetchplay.config import ServerConfig
from fetchplay.media.cache import MediaCache
from fetchplay.media.fetcher import MediaFetcher
from fetchplay.media.pipeline import MediaPipeline
from fetchplay.playback import VideoPlayer
from fetchplay.server import FetchPlayServer, RequestClient

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"v" * 2048


class TransferLog:
    """MockTransport handler that serves /videos/* and counts requests."""

    def __init__(self) -> None:
        self.paths: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.paths.append(request.url.path)
        if request.url.path.startswith("/videos/"):
            return httpx.Response(200, content=VIDEO_BYTES)
        return httpx.Response(404)


@pytest.fixture
def transfers() -> TransferLog:
    return TransferLog()


@pytest.fixture
def pipeline(media_dir, make_backend, transfers) -> MediaPipeline:
    client = httpx.Client(transport=httpx.MockTransport(transfers))
    return MediaPipeline(
        cache=MediaCache(media_dir),
        fetcher=MediaFetcher(client=client),
        player=VideoPlayer(make_backend(frames=2), frame_interval_ms=1),
    )


async def wait_until(predicate, timeout: float = 3.0) -> None:
    for _ in range(int(timeout / 0.02)):
        if predicate():
            return
        await asyncio.sleep(0.02)
    raise AssertionError("condition not met in time")


@contextlib.asynccontextmanager
async def running_server(pipeline: MediaPipeline):
    server = FetchPlayServer(ServerConfig(host="127.0.0.1", port=0), pipeline)
    await server.start()
    task = asyncio.create_task(server.serve_forever())
    try:
        yield server
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        server.close()


class TestEndToEnd:
    """Full request flow over a real socket."""

    @pytest.mark.asyncio
    async def test_second_request_plays_from_cache(
        self, pipeline: MediaPipeline, media_dir: Path, transfers: TransferLog
    ) -> None:
        """Test the same URL downloads once and plays twice."""
        backend = pipeline.player.backend
        url = "http://media.local/videos/clip.mp4"

        async with running_server(pipeline) as server:
            response = await RequestClient(server.port).send_urls([url, url])
            assert response["status"] == "success"
            await wait_until(lambda: backend.calls.count("close") == 2)

        assert transfers.paths == ["/videos/clip.mp4"]
        assert (media_dir / "clip.mp4").read_bytes() == VIDEO_BYTES
        assert backend.opened == [media_dir / "clip.mp4", media_dir / "clip.mp4"]
        assert backend.rendered == 4

    @pytest.mark.asyncio
    async def test_failures_do_not_stop_the_session(
        self, pipeline: MediaPipeline, media_dir: Path, transfers: TransferLog
    ) -> None:
        """Test invalid and failed requests are skipped and the next plays."""
        backend = pipeline.player.backend

        async with running_server(pipeline) as server:
            await RequestClient(server.port).send_urls(
                [
                    "http://media.local/videos/",
                    "http://media.local/missing/gone.mp4",
                    "http://media.local/videos/ok.mp4",
                ]
            )
            await wait_until(lambda: "close" in backend.calls)

        assert transfers.paths == ["/missing/gone.mp4", "/videos/ok.mp4"]
        assert not (media_dir / "gone.mp4").exists()
        assert not (media_dir / "gone.mp4.tmp").exists()
        assert backend.opened == [media_dir / "ok.mp4"]

    @pytest.mark.asyncio
    async def test_preloaded_file_is_never_fetched(
        self, pipeline: MediaPipeline, media_dir: Path, transfers: TransferLog
    ) -> None:
        """Test files already in the media directory play without HTTP."""
        (media_dir / "local.mp4").write_bytes(b"already here")
        backend = pipeline.player.backend

        async with running_server(pipeline) as server:
            await RequestClient(server.port).send_url("http://nowhere/local.mp4")
            await wait_until(lambda: "close" in backend.calls)

        assert transfers.paths == []
        assert (media_dir / "local.mp4").read_bytes() == b"already here"
