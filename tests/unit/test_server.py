"""Unit tests for FetchPlayServer state and line handling."""

import asyncio
import logging
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from fetchplay.config import ServerConfig
from fetchplay.media.models import Outcome, RequestOutcome
from fetchplay.server.server import FetchPlayServer


def make_handler() -> Mock:
    handler = Mock()
    handler.handle_request.side_effect = lambda line: RequestOutcome(
        Outcome.COMPLETED, line.strip(), line.strip()
    )
    return handler


def feed(data: bytes, limit: int = 1001) -> asyncio.StreamReader:
    """StreamReader pre-loaded with `data` followed by EOF."""
    reader = asyncio.StreamReader(limit=limit)
    reader.feed_data(data)
    reader.feed_eof()
    return reader


class TestServerInitialization:
    """Test server construction."""

    def test_initial_state(self) -> None:
        """Test server starts unbound with no sessions served."""
        server = FetchPlayServer(ServerConfig(port=5000), make_handler())

        assert server.server is None
        assert server.sessions_served == 0
        assert server.port == 5000
        server.close()

    def test_close_releases_handler(self) -> None:
        """Test close() closes the request handler."""
        handler = make_handler()
        FetchPlayServer(ServerConfig(), handler).close()
        handler.close.assert_called_once()

    def test_close_warns_about_request_still_running(self, caplog) -> None:
        """Test close() reports a request the playback thread is still busy with."""
        server = FetchPlayServer(ServerConfig(), make_handler())
        server._in_flight = Mock()
        server._in_flight.running.return_value = True

        with caplog.at_level(logging.WARNING, logger="fetchplay.server.server"):
            server.close()

        assert "still in progress" in caplog.text

    @pytest.mark.asyncio
    async def test_shutdown_before_start_is_a_no_op(self) -> None:
        """Test shutdown() on an unbound server returns immediately."""
        server = FetchPlayServer(ServerConfig(), make_handler())
        await server.shutdown()
        assert server.sessions == set()
        server.close()

    @pytest.mark.asyncio
    async def test_client_accepted_during_shutdown_is_closed(self) -> None:
        """Test a connection that arrives while closing is hung up unserved."""
        handler = make_handler()
        server = FetchPlayServer(ServerConfig(), handler)
        server._closing = True
        writer = Mock()
        writer.get_extra_info.return_value = ("127.0.0.1", 50000)

        await server.handle_client(feed(b"clip.mp4\n"), writer)

        writer.close.assert_called_once()
        handler.handle_request.assert_not_called()
        assert server.sessions_served == 0
        server.close()


class TestServeLines:
    """Test per-line request dispatch."""

    @pytest.mark.asyncio
    async def test_each_line_is_one_request(self) -> None:
        """Test lines are handed to the handler in order, raw."""
        handler = make_handler()
        server = FetchPlayServer(ServerConfig(), handler)

        await server._serve_lines(feed(b"http://h/a.mp4\nhttp://h/b.mp4\r\n"))

        lines = [c.args[0] for c in handler.handle_request.call_args_list]
        assert lines == ["http://h/a.mp4\n", "http://h/b.mp4\r\n"]
        server.close()

    @pytest.mark.asyncio
    async def test_unterminated_final_line_is_processed(self) -> None:
        """Test text without newline before EOF still counts."""
        handler = make_handler()
        server = FetchPlayServer(ServerConfig(), handler)

        await server._serve_lines(feed(b"clip.mp4"))

        handler.handle_request.assert_called_once_with("clip.mp4")
        server.close()

    @pytest.mark.asyncio
    async def test_empty_line_still_dispatched(self) -> None:
        """Test blank lines reach the handler, which reports them invalid."""
        handler = make_handler()
        server = FetchPlayServer(ServerConfig(), handler)

        await server._serve_lines(feed(b"\n"))

        handler.handle_request.assert_called_once_with("\n")
        server.close()

    @pytest.mark.asyncio
    async def test_oversized_line_ends_session(self) -> None:
        """Test a line over the limit closes the session unprocessed."""
        handler = make_handler()
        server = FetchPlayServer(ServerConfig(max_line=10), handler)

        await server._serve_lines(feed(b"x" * 50 + b"\nclip.mp4\n", limit=11))

        handler.handle_request.assert_not_called()
        server.close()

    @pytest.mark.asyncio
    async def test_handler_error_does_not_end_session(self) -> None:
        """Test an unexpected handler error skips only that line."""
        handler = make_handler()
        handler.handle_request.side_effect = [
            RuntimeError("display unavailable"),
            RequestOutcome(Outcome.COMPLETED, "b.mp4", "b.mp4"),
        ]
        server = FetchPlayServer(ServerConfig(), handler)

        await server._serve_lines(feed(b"a.mp4\nb.mp4\n"))

        assert handler.handle_request.call_count == 2
        server.close()

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_replaced(self) -> None:
        """Test undecodable bytes don't crash the session."""
        handler = make_handler()
        server = FetchPlayServer(ServerConfig(), handler)

        await server._serve_lines(feed(b"clip\xff.mp4\n"))

        handler.handle_request.assert_called_once_with("clip\ufffd.mp4\n")
        server.close()
