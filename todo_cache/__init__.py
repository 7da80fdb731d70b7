"""
Todo-Cache: Todo List Service

A todo-list record service backed by an in-memory, capacity-bounded,
time-expiring LRU store, served over a line-based TCP protocol with
Python asyncio.
"""

__version__ = "1.0.0"
