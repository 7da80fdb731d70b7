"""
Async TCP Server Module

This module exposes the RecordService over the todo-cache line protocol.

Each client connection is served by its own coroutine; commands on one
connection run in order, while connections run concurrently, so mutations
from different clients overlap during their artificial delay.
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional

from ..cache.store import RecordStore
from ..config.settings import settings
from ..protocol.commands import Command, CommandType, Response
from ..protocol.parser import ProtocolParser
from ..records.models import SimulatedFailure
from ..records.service import RecordService

logger = logging.getLogger(__name__)


class TodoServer:
    """
    Asynchronous TCP server for the todo-cache service.

    Features:
    - Non-blocking I/O with asyncio
    - Persistent connections (multiple commands per connection)
    - Simulated failures reported as ERROR lines; the connection stays open
    - Optional background sweep of expired store entries

    Usage:
        server = TodoServer(host='0.0.0.0', port=4000)
        await server.start()  # Runs until stopped

    Attributes:
        host: Server bind address (e.g., '0.0.0.0')
        port: Server port number (e.g., 4000)
        service: The RecordService shared by all connections
        parser: The ProtocolParser for parsing commands
        cleanup_interval: Seconds between expired-entry sweeps (0 = off)
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            service: RecordService = None,
            cleanup_interval: float = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            service: RecordService instance (creates one over a new store if not provided)
            cleanup_interval: Sweep interval (default from settings.CLEANUP_INTERVAL)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.service = service if service is not None else RecordService(RecordStore())
        self.parser = ProtocolParser()
        self.cleanup_interval = (
            cleanup_interval if cleanup_interval is not None else settings.CLEANUP_INTERVAL
        )

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._sweeper: Optional[asyncio.Task] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0
        self._failed_mutations = 0

    @property
    def store(self) -> RecordStore:
        return self.service.store

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Reads commands until the client disconnects or sends QUIT, writing
        one response line per command. The writer is always closed on exit.
        """
        addr = writer.get_extra_info('peername')
        self._connection_count += 1
        logger.debug(f"Client connected: {addr}")

        try:
            while True:
                try:
                    data = await reader.readline()
                except (ValueError, asyncio.LimitOverrunError):
                    # Over-long line; the reader drops what it buffered of it
                    logger.warning(f"Request line over {settings.READ_BUFFER_SIZE} bytes from {addr}")
                    writer.write(self.parser.format_response(Response.invalid_command()).encode())
                    await writer.drain()
                    continue

                if not data:
                    logger.debug(f"Client disconnected: {addr}")
                    break

                try:
                    raw = data.decode().rstrip('\r\n')
                except UnicodeDecodeError:
                    response = Response.error("invalid encoding")
                    writer.write(self.parser.format_response(response).encode())
                    await writer.drain()
                    continue

                command = self.parser.parse_request(raw)

                if command.type == CommandType.QUIT:
                    logger.debug(f"Client requested quit: {addr}")
                    break

                if not command.is_valid:
                    logger.debug(f"Invalid command from {addr}: {command.raw!r}")
                    response = Response.invalid_command()
                else:
                    self._total_requests += 1
                    response = await self._execute_command(command)

                writer.write(self.parser.format_response(response).encode())
                await writer.drain()

        except ConnectionResetError:
            logger.debug(f"Connection reset by client: {addr}")
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            try:
                writer.close()
                await writer.wait_closed()
            except ConnectionError:
                pass

    async def _execute_command(self, command: Command) -> Response:
        """
        Route a valid command to the RecordService.

        Args:
            command: The Command object to execute

        Returns:
            Response object with the result
        """
        if command.type == CommandType.TODOS:
            return Response.records(self.service.list_all())

        if command.type == CommandType.TODOS_BY_TYPE:
            return Response.records(self.service.list_by_type(command.todo_type))

        if command.type == CommandType.TODO:
            return Response.record(self.service.get_by_id(command.id))

        try:
            if command.type == CommandType.ADD_TODO:
                record = await self.service.create(command.todo_type, command.description)
                return Response.record(record)

            if command.type == CommandType.UPDATE_TODO:
                record = await self.service.update(
                    command.id, command.todo_type, command.description
                )
                return Response.record(record)
        except SimulatedFailure as exc:
            self._failed_mutations += 1
            return Response.error(str(exc))

        return Response.invalid_command()

    async def _sweep_expired(self) -> None:
        """Periodically purge expired entries until cancelled."""
        while True:
            await asyncio.sleep(self.cleanup_interval)
            removed = self.store.cleanup_expired()
            if removed:
                logger.debug(f"Sweeper removed {removed} expired todos")

    async def start(self) -> None:
        """
        Start the server and begin accepting connections.

        Runs until cancelled or until stop() is called. Should be awaited
        from asyncio.run() or within an existing event loop.

        Example:
            server = TodoServer(port=4000)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
            limit=settings.READ_BUFFER_SIZE,
        )
        self._running = True
        if self.cleanup_interval > 0:
            self._sweeper = asyncio.create_task(self._sweep_expired())

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving on {addrs}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False
            await self._stop_sweeper()

    async def _stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        Closes the listener, stops the sweeper and waits for shutdown.
        """
        await self._stop_sweeper()
        if self._server is None:
            return

        self._server.close()
        try:
            await self._server.wait_closed()
        finally:
            self._server = None
            self._running = False

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with connection and request counters plus the
            store statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "failed_mutations": self._failed_mutations,
            "store_stats": self.store.get_stats(),
        }
