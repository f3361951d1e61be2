"""Raw HTTP metrics endpoint on asyncio streams."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from link_sim.config import DEFAULT_HTTP_PORT
from link_sim.dispatcher import dispatch

if TYPE_CHECKING:
    from link_sim.sampler import MetricsSampler

logger = logging.getLogger(__name__)

READ_LIMIT = 1024  # longer requests are truncated


class MetricsServer:
    """Serves one response per connection, one task per connection.

    Each connection is read once, dispatched, answered and closed. There is
    no keep-alive and no ordering between connections.
    """

    def __init__(
        self,
        sampler: MetricsSampler,
        host: str = "0.0.0.0",
        port: int = DEFAULT_HTTP_PORT,
        read_limit: int = READ_LIMIT,
    ) -> None:
        self.sampler = sampler
        self.host = host
        self.port = port
        self.read_limit = read_limit
        self._server: asyncio.Server | None = None
        self.connections_served = 0

    @property
    def bound_port(self) -> int:
        """Port actually bound, useful when constructed with port 0."""
        if self._server is None or not self._server.sockets:
            return self.port
        return self._server.sockets[0].getsockname()[1]

    async def handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        peer = writer.get_extra_info("peername")
        try:
            request = await reader.read(self.read_limit)
            if not request:
                logger.debug("Empty request from %s, closing", peer)
                return

            response = dispatch(request, self.sampler)
            logger.debug("%s %s -> %d", peer, request.split(b"\r\n", 1)[0], response.status)
            writer.write(response.encode())
            await writer.drain()
            self.connections_served += 1
        except OSError as e:
            logger.warning("Connection error from %s: %s", peer, e)
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

    async def start(self) -> None:
        """Bind and listen. Raises OSError if the socket cannot be set up."""
        self._server = await asyncio.start_server(self.handle_connection, self.host, self.port)
        logger.info("HTTP server listening on %s:%d", self.host, self.bound_port)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None


def run_server(
    sampler: MetricsSampler, host: str = "0.0.0.0", port: int = DEFAULT_HTTP_PORT
) -> None:
    server = MetricsServer(sampler, host=host, port=port)
    print(f"Starting link metrics server at http://{host}:{port}")
    print("Endpoints: GET /metrics, GET /health")
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(server.serve_forever())
