"""
Record Store Module

Bounded, time-expiring key-value store that holds the service's records.

- Capacity: at most max_size entries; inserting a new id into a full store
  evicts the least recently used entry.
- TTL: every write sets an absolute deadline of now + ttl; expired entries
  are purged lazily when accessed (or by cleanup_expired()).
"""

import logging
import time
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from ..config.settings import settings
from .eviction import LRUEvictionPolicy

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class RecordStore:
    """
    In-memory record store with TTL and LRU eviction.

    Internal Storage:
        An LRUEvictionPolicy keyed by record id.
        Format: id -> (record, expiration_deadline)
        expiration_deadline = 0 means no expiration

    Both get() and put() count as a use for LRU ordering; list() does not.

    The store is not thread-safe. It is meant to be owned by a single
    asyncio event loop, where each call runs to completion without
    interleaving.

    Attributes:
        max_size: Maximum number of entries held at once
        ttl: Seconds an entry stays live after its last write (0 = forever)
    """

    def __init__(self, max_size: int = None, ttl: float = None, clock: Clock = time.monotonic):
        """
        Initialize the store.

        Args:
            max_size: Maximum number of entries (default from settings.MAX_ENTRIES)
            ttl: Time-to-live in seconds (default from settings.ENTRY_TTL)
            clock: Zero-argument callable returning monotonic seconds

        Raises:
            ValueError: If max_size is not positive or ttl is negative
        """
        self.max_size = max_size if max_size is not None else settings.MAX_ENTRIES
        self.ttl = ttl if ttl is not None else settings.ENTRY_TTL
        if self.ttl < 0:
            raise ValueError("ttl must not be negative")

        self._clock = clock
        self._entries = LRUEvictionPolicy(self.max_size)

    def _is_expired(self, expires_at: float, now: float) -> bool:
        return bool(expires_at) and expires_at <= now

    def put(self, record_id: str, record: Any) -> Optional[str]:
        """
        Insert or replace the record stored under record_id.

        Resets the entry's deadline to now + ttl and marks it most recently
        used. Replacing an existing id never evicts.

        Args:
            record_id: The id to store under
            record: The record value

        Returns:
            The id of the evicted entry if an eviction occurred, None otherwise
        """
        now = self._clock()
        expires_at = now + self.ttl if self.ttl > 0 else 0

        if self._entries.peek(record_id) is None and self._entries.is_full():
            # Dead entries go before a live one is sacrificed
            self._purge_expired(now)

        evicted = self._entries.put(record_id, (record, expires_at))
        if evicted is not None:
            logger.debug(f"Evicted least recently used entry: {evicted}")
        return evicted

    def get(self, record_id: str) -> Optional[Any]:
        """
        Retrieve the record stored under record_id.

        Returns:
            The record if present and not expired, None otherwise
        """
        entry: Optional[Tuple[Any, float]] = self._entries.peek(record_id)
        if entry is None:
            return None

        record, expires_at = entry
        if self._is_expired(expires_at, self._clock()):
            # Lazy expiration
            self._entries.delete(record_id)
            logger.debug(f"Expired entry purged on access: {record_id}")
            return None

        self._entries.get(record_id)
        return record

    def list(self) -> Iterator[Any]:
        """
        Lazily yield every live record.

        Liveness is checked against the clock as each record is produced,
        and recency order is left untouched. The id order is captured when
        iteration starts, so the store may be written while a consumer is
        suspended between items.
        """
        for record_id in self._entries.keys():
            entry = self._entries.peek(record_id)
            if entry is None:
                continue
            record, expires_at = entry
            if not self._is_expired(expires_at, self._clock()):
                yield record

    def size(self) -> int:
        """
        Get the current number of entries in the store.

        Note: This may include expired entries that haven't been purged yet.
        """
        return self._entries.size()

    def clear(self) -> None:
        """Remove all entries from the store."""
        self._entries.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired entries from the store (active expiration).

        Returns:
            Number of entries removed
        """
        return self._purge_expired(self._clock())

    def _purge_expired(self, now: float) -> int:
        expired = []
        for record_id in self._entries.keys():
            _, expires_at = self._entries.peek(record_id)
            if self._is_expired(expires_at, now):
                expired.append(record_id)

        for record_id in expired:
            self._entries.delete(record_id)
        if expired:
            logger.debug(f"Purged {len(expired)} expired entries")
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing:
            - total_entries: Entries currently held
            - expired_entries: Expired entries not yet purged
            - live_entries: Entries that are not expired
            - max_size: Maximum capacity
            - ttl: Configured time-to-live in seconds
            - utilization: Current usage as fraction of max_size
            - lru_id: Id the next eviction would remove (None if empty)
            - mru_id: Most recently read or written id (None if empty)
        """
        now = self._clock()
        total = self._entries.size()
        expired = sum(
            1 for record_id in self._entries.keys()
            if self._is_expired(self._entries.peek(record_id)[1], now)
        )

        return {
            "total_entries": total,
            "expired_entries": expired,
            "live_entries": total - expired,
            "max_size": self.max_size,
            "ttl": self.ttl,
            "utilization": total / self.max_size,
            "lru_id": self._entries.get_lru_key(),
            "mru_id": self._entries.get_mru_key(),
        }
