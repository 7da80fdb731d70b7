"""
LRU Eviction Policy Module

Recency index used by RecordStore to pick eviction victims.

LRU Concept:
- Most recently touched entries are at the END of the OrderedDict
- Least recently touched entries are at the BEGINNING
- A read (get) and a write (put) both count as a touch
- peek() and keys() look without touching
- On eviction, remove from the beginning
"""

from collections import OrderedDict
from typing import Any, List, Optional


class LRUEvictionPolicy:
    """
    Least Recently Used (LRU) index with a fixed capacity.

    All operations are O(1) except keys(), which copies the key order.

    Usage:
        lru = LRUEvictionPolicy(max_size=25)
        lru.put("a", entry_a)
        lru.get("a")             # marks "a" as most recently used
        evicted = lru.put("b", entry_b)

    Attributes:
        max_size: Maximum number of items before put() evicts
    """

    def __init__(self, max_size: int):
        """
        Initialize the index.

        Args:
            max_size: Maximum number of items (must be positive)

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._items: "OrderedDict[str, Any]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        """Return the item for key and mark it most recently used."""
        if key not in self._items:
            return None

        self._items.move_to_end(key)
        return self._items[key]

    def peek(self, key: str) -> Optional[Any]:
        """Return the item for key without changing recency order."""
        return self._items.get(key)

    def put(self, key: str, value: Any) -> Optional[str]:
        """
        Insert or replace an item and mark it most recently used.

        Replacing an existing key never evicts. Inserting a new key into a
        full index evicts exactly one item, the least recently used.

        Returns:
            The evicted key if eviction occurred, None otherwise
        """
        if key in self._items:
            self._items[key] = value
            self._items.move_to_end(key)
            return None

        evicted_key = None
        if len(self._items) >= self.max_size:
            evicted_key, _ = self._items.popitem(last=False)

        self._items[key] = value
        return evicted_key

    def delete(self, key: str) -> bool:
        """Remove key; returns False if it was not present."""
        if key in self._items:
            del self._items[key]
            return True
        return False

    def keys(self) -> List[str]:
        """Snapshot of keys from least to most recently used."""
        return list(self._items.keys())

    def get_lru_key(self) -> Optional[str]:
        """Key that the next eviction would remove, or None if empty."""
        if not self._items:
            return None
        return next(iter(self._items))

    def get_mru_key(self) -> Optional[str]:
        """Most recently touched key, or None if empty."""
        if not self._items:
            return None
        return next(reversed(self._items))

    def size(self) -> int:
        """Get current number of items."""
        return len(self._items)

    def is_full(self) -> bool:
        """Check if the index is at maximum capacity."""
        return len(self._items) >= self.max_size

    def clear(self) -> None:
        """Remove all items."""
        self._items.clear()
