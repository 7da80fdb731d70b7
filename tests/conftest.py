"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import pytest
import pytest_asyncio
from contextlib import closing
from typing import AsyncGenerator

from todo_cache.cache.eviction import LRUEvictionPolicy
from todo_cache.cache.store import RecordStore
from todo_cache.network.tcp_server import TodoServer
from todo_cache.protocol.parser import ProtocolParser
from todo_cache.records.service import RecordService


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class FakeClock:
    """Manually advanced monotonic clock for deterministic TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# RecordStore Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """A fake clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def store() -> RecordStore:
    """A RecordStore with room for 100 entries and no expiry."""
    return RecordStore(max_size=100, ttl=0)


@pytest.fixture
def small_store() -> RecordStore:
    """A RecordStore with small capacity for eviction testing (5 entries)."""
    return RecordStore(max_size=5, ttl=0)


@pytest.fixture
def ttl_store(clock: FakeClock) -> RecordStore:
    """A RecordStore whose entries live 10 seconds on the fake clock."""
    return RecordStore(max_size=100, ttl=10, clock=clock)


# ============================================================================
# LRU Index Fixtures
# ============================================================================

@pytest.fixture
def lru_cache() -> LRUEvictionPolicy:
    """Create an LRU index for testing (5 items max)."""
    return LRUEvictionPolicy(max_size=5)


# ============================================================================
# Service and Protocol Fixtures
# ============================================================================

@pytest.fixture
def service(clock: FakeClock) -> RecordService:
    """A RecordService without artificial latency, over a 25-entry store."""
    return RecordService(RecordStore(max_size=25, ttl=300, clock=clock), mutation_delay=0)


@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest.fixture
def mutation_delay() -> float:
    """Artificial mutation latency for the server fixture; override per test module."""
    return 0


@pytest_asyncio.fixture
async def server(server_port: int, mutation_delay: float) -> AsyncGenerator[TodoServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a TodoServer on a random free port
    2. Starts it in a background task
    3. Yields the server for testing
    4. Cleans up after the test
    """
    service = RecordService(RecordStore(max_size=25, ttl=0), mutation_delay=mutation_delay)
    srv = TodoServer(host='127.0.0.1', port=server_port, service=service, cleanup_interval=0)

    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Usage:
        async with AsyncClient('127.0.0.1', 4000) as client:
            response = await client.send_command("TODOS")
            assert response == "OK []"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except ConnectionError:
                pass

    async def send_command(self, command: str) -> str:
        """
        Send a command and receive the response.

        Returns:
            Response string (stripped of trailing newline)
        """
        if not command.endswith('\n'):
            command += '\n'

        self.writer.write(command.encode())
        await self.writer.drain()

        response = await self.reader.readline()
        return response.decode().strip()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.send_command("TODO abc")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
