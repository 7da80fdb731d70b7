"""Network module for todo-cache."""

from .tcp_server import TodoServer

__all__ = ["TodoServer"]
