"""TCP client for sending media URLs to a fetchplay server."""

import asyncio
from collections.abc import Iterable
from typing import Any


class RequestClient:
    """Client that writes URL lines to a fetchplay server."""

    def __init__(self, port: int, host: str = "127.0.0.1") -> None:
        self.host = host
        self.port = port

    async def send_urls(self, urls: Iterable[str]) -> dict[str, Any]:
        """Send each URL as one line over a single connection.

        The server sends nothing back, so success only means the lines
        were written before the connection closed.

        Args:
            urls: URLs to send, a trailing newline is added when missing

        Returns:
            {"status": "success", "sent": n} or {"status": "error", "error": msg}
        """
        try:
            reader, writer = await asyncio.open_connection(self.host, self.port)
        except ConnectionRefusedError:
            return {"status": "error", "error": "Server not running"}
        except OSError as e:
            return {"status": "error", "error": f"Communication error: {e}"}

        sent = 0
        try:
            for url in urls:
                writer.write(url.rstrip("\n").encode() + b"\n")
                sent += 1
            await writer.drain()
        except ConnectionError as e:
            return {"status": "error", "error": f"Connection lost: {e}", "sent": sent}
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass

        return {"status": "success", "sent": sent}

    async def send_url(self, url: str) -> dict[str, Any]:
        """Send a single URL line."""
        return await self.send_urls([url])
