"""
Record Service Module

Domain operations on top of RecordStore: listing, lookup by id, and the
create/update mutations with their artificial latency and sentinel failure.
"""

import asyncio
import logging
import uuid
from typing import Callable, Iterator, Optional

from ..cache.store import RecordStore
from ..config.settings import settings
from .models import FAIL_SENTINEL, Record, SimulatedFailure

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Return a fresh globally unique record id."""
    return uuid.uuid4().hex


class RecordService:
    """
    Read and write operations for todo records.

    The store is injected; the service keeps no state of its own. Mutations
    sleep for mutation_delay seconds before touching the store. Mutations
    that are in flight at the same time do not coordinate: whichever
    finishes its delay first writes first, and the last write wins.

    Usage:
        service = RecordService(RecordStore(), mutation_delay=0)
        todo = await service.create("chore", "take out the trash")
        service.get_by_id(todo.id)

    Attributes:
        store: The RecordStore holding every record
        mutation_delay: Seconds each create/update waits (0 = no delay)
    """

    def __init__(
            self,
            store: RecordStore,
            mutation_delay: float = None,
            id_factory: Callable[[], str] = None,
    ):
        self.store = store
        self.mutation_delay = (
            mutation_delay if mutation_delay is not None else settings.MUTATION_DELAY
        )
        self._id_factory = id_factory if id_factory is not None else generate_id

    def list_all(self) -> Iterator[Record]:
        """All live records, in no particular order."""
        return self.store.list()

    def list_by_type(self, record_type: str) -> Iterator[Record]:
        """Live records whose type equals record_type (case-sensitive)."""
        return (record for record in self.store.list() if record.type == record_type)

    def get_by_id(self, record_id: str) -> Optional[Record]:
        """The record stored under record_id, or None if absent."""
        return self.store.get(record_id)

    async def create(self, record_type: str, description: str) -> Record:
        """
        Create a record under a freshly generated id.

        Raises:
            SimulatedFailure: If record_type is the "fail" sentinel; the
                store is left untouched
        """
        await self._simulate_latency()
        self._check_sentinel(record_type)

        record = Record(id=self._id_factory(), type=record_type, description=description)
        self.store.put(record.id, record)
        logger.info(f"Created todo {record.id} (type={record_type})")
        return record

    async def update(self, record_id: str, record_type: str, description: str) -> Record:
        """
        Replace the type and description stored under record_id.

        An id that is not in the store is not an error: the record is
        created under that id.

        Raises:
            SimulatedFailure: If record_type is the "fail" sentinel; the
                store is left untouched
        """
        await self._simulate_latency()
        self._check_sentinel(record_type)

        record = Record(id=record_id, type=record_type, description=description)
        self.store.put(record_id, record)
        logger.info(f"Updated todo {record_id} (type={record_type})")
        return record

    async def _simulate_latency(self) -> None:
        if self.mutation_delay > 0:
            await asyncio.sleep(self.mutation_delay)

    def _check_sentinel(self, record_type: str) -> None:
        if record_type == FAIL_SENTINEL:
            logger.warning(f"Rejecting mutation with sentinel type '{FAIL_SENTINEL}'")
            raise SimulatedFailure()
