"""TCP server that plays the media URLs its clients send."""

import asyncio
import contextlib
import logging
import signal
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from ..config import FetchPlayConfig, ServerConfig
from ..media.models import RequestOutcome

logger = logging.getLogger(__name__)


class RequestHandler(Protocol):
    """Anything that turns a URL line into a RequestOutcome."""

    def handle_request(self, line: str) -> RequestOutcome: ...

    def close(self) -> None: ...


class FetchPlayServer:
    """Line-oriented TCP server serving one client at a time.

    Each received line is a media URL handed to the request handler. The
    server never writes back to the client; outcomes go to the log.
    """

    def __init__(self, config: ServerConfig, handler: RequestHandler) -> None:
        """Initialize server state without binding yet.

        Args:
            config: Listener settings (host, port, backlog, max_line)
            handler: Pipeline that processes each URL line
        """
        self.config = config
        self.handler = handler
        self.server: asyncio.Server | None = None
        self.sessions_served = 0

        # Connected clients, including those queued behind the session lock
        self.sessions: set[asyncio.Task] = set()
        self._in_flight: Future | None = None
        self._closing = False

        # Sessions run strictly one after another
        self.session_lock = asyncio.Lock()

        # Display libraries want every call on the same thread
        self.executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="fetchplay-playback"
        )

    @property
    def port(self) -> int:
        """Port actually bound (differs from config when config.port is 0)."""
        if self.server is None or not self.server.sockets:
            return self.config.port
        return self.server.sockets[0].getsockname()[1]

    async def handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """Serve one session: process lines until the client disconnects."""
        peer = writer.get_extra_info("peername")
        address = peer[0] if peer else "unknown"

        if self._closing:
            # Accepted while shutting down
            writer.close()
            return

        session = asyncio.current_task()
        if session is not None:
            self.sessions.add(session)

        try:
            async with self.session_lock:
                logger.info(f"Client connected: {address}")
                try:
                    await self._serve_lines(reader)
                finally:
                    self.sessions_served += 1
                    logger.info(f"Client disconnected: {address}")
        finally:
            if session is not None:
                self.sessions.discard(session)
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()

        logger.info("Waiting for client...")

    async def _serve_lines(self, reader: asyncio.StreamReader) -> None:
        while True:
            logger.info("Waiting for input...")
            try:
                line = await reader.readline()
            except ValueError:
                # readline() reports a line over the stream limit as ValueError
                logger.error(
                    f"Received line longer than {self.config.max_line} bytes, "
                    "closing connection"
                )
                return
            except ConnectionError as e:
                logger.error(f"Failed to receive bytes from client: {e}")
                return

            if not line:
                return

            text = line.decode("utf-8", errors="replace")
            try:
                self._in_flight = self.executor.submit(self.handler.handle_request, text)
                outcome = await asyncio.wrap_future(self._in_flight)
            except Exception as e:
                logger.error(f"Error handling request: {e}")
                continue

            logger.info(f"Request finished: {outcome.outcome.value}")

    async def start(self) -> None:
        """Bind and start listening.

        Raises:
            RuntimeError: If the socket cannot be created, bound or listened on
        """
        try:
            self.server = await asyncio.start_server(
                self.handle_client,
                self.config.host,
                self.config.port,
                backlog=self.config.backlog,
                # +1 so a max_line URL still fits with its newline
                limit=self.config.max_line + 1,
            )
        except OSError as e:
            logger.error(f"Failed to bind the server socket: {e}")
            raise RuntimeError(
                f"Failed to listen on {self.config.host}:{self.config.port}: {e}"
            ) from e

        logger.info(f"✓ Listening on {self.config.host}:{self.port}")
        logger.info("Waiting for client...")

    async def serve_forever(self) -> None:
        """Accept clients until cancelled, then shut the listener down."""
        if self.server is None:
            await self.start()
        try:
            # start_server() is already accepting; park until cancelled
            await asyncio.get_running_loop().create_future()
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Stop accepting and drop every connected client.

        Server.wait_closed() waits for open connections on Python 3.12+,
        so sessions are cancelled before waiting on the listener.
        """
        if self.server is None:
            return
        self._closing = True
        self.server.close()

        sessions = list(self.sessions)
        for session in sessions:
            session.cancel()
        await asyncio.gather(*sessions, return_exceptions=True)

        await self.server.wait_closed()

    def close(self) -> None:
        """Stop listening and release the handler.

        A request already running on the playback thread cannot be
        interrupted; interpreter exit waits for it to finish.
        """
        if self.server is not None:
            self.server.close()
        if self._in_flight is not None and self._in_flight.running():
            logger.warning(
                "A request is still in progress, exit waits for it to finish"
            )
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.handler.close()


async def serve(config: FetchPlayConfig, handler: RequestHandler) -> None:
    """Run a server until SIGTERM or SIGINT.

    Raises:
        RuntimeError: If the listener cannot be set up
    """
    server = FetchPlayServer(config.server, handler)
    try:
        await server.start()
        serve_task = asyncio.create_task(server.serve_forever())

        loop = asyncio.get_running_loop()

        def handle_signal() -> None:
            logger.info("Received shutdown signal")
            serve_task.cancel()

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, handle_signal)

        try:
            await serve_task
        except asyncio.CancelledError:
            if not serve_task.done():
                # serve() itself was cancelled; let the listener finish closing
                with contextlib.suppress(asyncio.CancelledError):
                    await serve_task
            logger.info("Server shutdown complete")
    finally:
        server.close()
