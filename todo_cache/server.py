#!/usr/bin/env python3
"""
Todo-Cache Server Entry Point

This is the main entry point for starting the todo-cache server.

Usage:
    python -m todo_cache.server                      # Default settings (0.0.0.0:4000)
    python -m todo_cache.server --port 8080          # Custom port
    python -m todo_cache.server --host 127.0.0.1     # Custom host
    python -m todo_cache.server --debug              # Enable debug logging
    python -m todo_cache.server --max-entries 100    # Custom store size
    python -m todo_cache.server --mutation-delay 0   # No artificial latency

Environment Variables:
    TODO_CACHE_HOST            - Server bind address
    TODO_CACHE_PORT            - Server port
    TODO_CACHE_MAX_ENTRIES     - Maximum number of stored todos
    TODO_CACHE_ENTRY_TTL       - Seconds a todo lives after its last write
    TODO_CACHE_MUTATION_DELAY  - Seconds each create/update waits
    TODO_CACHE_DEBUG           - Enable debug mode (true/false)
"""

import argparse
import asyncio
import logging
import signal
import sys

from .cache.store import RecordStore
from .config.settings import settings
from .network.tcp_server import TodoServer
from .records.service import RecordService


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="todo-cache: todo list service over an expiring LRU store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--max-entries",
        type=int,
        default=settings.MAX_ENTRIES,
        help="Maximum number of todos kept in the store",
    )

    parser.add_argument(
        "--ttl",
        type=float,
        default=settings.ENTRY_TTL,
        help="Seconds a todo stays live after its last write (0 = forever)",
    )

    parser.add_argument(
        "--mutation-delay",
        type=float,
        default=settings.MUTATION_DELAY,
        help="Artificial latency in seconds for addTodo/updateTodo",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else settings.LOG_LEVEL.upper()

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def build_server(args: argparse.Namespace) -> TodoServer:
    """Wire store, service and server together from parsed arguments."""
    store = RecordStore(max_size=args.max_entries, ttl=args.ttl)
    service = RecordService(store, mutation_delay=args.mutation_delay)
    return TodoServer(host=args.host, port=args.port, service=service)


def main() -> None:
    """Main entry point for the server."""
    args = parse_args()

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    server = build_server(args)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    async def shutdown(sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received signal {sig.name}, initiating shutdown...")
        await server.stop()

    # Register signal handlers (Unix only)
    if sys.platform != 'win32':
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: asyncio.create_task(shutdown(s))
            )

    logger.info("Starting todo-cache server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Max entries: {args.max_entries}")
    logger.info(f"  TTL: {args.ttl}s")
    logger.info(f"  Mutation delay: {args.mutation_delay}s")
    logger.info(f"  Debug: {args.debug}")

    try:
        loop.run_until_complete(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        loop.run_until_complete(server.stop())
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        server.store.clear()
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
