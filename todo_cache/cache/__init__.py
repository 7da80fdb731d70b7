"""Cache module for todo-cache."""

from .eviction import LRUEvictionPolicy
from .store import RecordStore

__all__ = ["RecordStore", "LRUEvictionPolicy"]
