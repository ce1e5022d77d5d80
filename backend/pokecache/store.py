# backend/pokecache/store.py

import abc
import asyncio
import logging
from typing import AsyncIterator, Dict, List, Optional

from .events import RecordFeed
from .exceptions import PokeCacheError, StoreError
from .models import PokemonRecord

logger = logging.getLogger(__name__)


class RecordStore(abc.ABC):
    """
    Durable store of cached records keyed by id, queryable by name.

    Every mutation is atomic per call and publishes the full record list to
    subscribers of watch().
    """

    def __init__(self) -> None:
        self._feed = RecordFeed()

    @abc.abstractmethod
    async def insert_or_replace(self, record: PokemonRecord) -> None:
        """Stores the record, replacing any existing row with the same id."""

    @abc.abstractmethod
    async def find_by_name(self, name: str) -> Optional[PokemonRecord]:
        """Case-insensitive lookup; None when absent."""

    @abc.abstractmethod
    async def find_all(self) -> List[PokemonRecord]:
        """All records in ascending id order."""

    @abc.abstractmethod
    async def delete_by_name(self, name: str) -> bool:
        """Removes the record; returns False if there was none."""

    @abc.abstractmethod
    async def delete_all(self) -> None:
        ...

    @abc.abstractmethod
    async def count(self) -> int:
        ...

    async def close(self) -> None:
        pass

    def watch(self) -> AsyncIterator[List[PokemonRecord]]:
        return self._feed.stream(self.find_all)

    async def _notify(self) -> None:
        """Publishes the current list; a failed snapshot never fails the mutation."""
        if not self._feed.subscriber_count:
            return
        try:
            snapshot = await self.find_all()
        except PokeCacheError as e:
            logger.warning(f"Skipping record feed update, snapshot failed: {type(e).__name__}: {e}")
            return
        self._feed.publish(snapshot)


class InMemoryRecordStore(RecordStore):
    """Process-local store. Mutations are serialized behind an asyncio.Lock."""

    def __init__(self) -> None:
        super().__init__()
        self._records: Dict[int, PokemonRecord] = {}
        self._ids_by_name: Dict[str, int] = {}
        self._lock = asyncio.Lock()
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise StoreError("Record store is closed.")

    async def insert_or_replace(self, record: PokemonRecord) -> None:
        self._check_open()
        async with self._lock:
            previous = self._records.get(record.id)
            if previous is not None:
                self._ids_by_name.pop(previous.name.lower(), None)
            self._records[record.id] = record
            self._ids_by_name[record.name.lower()] = record.id
        logger.debug(f"Stored record {record.id} ('{record.name}'), replaced={previous is not None}")
        await self._notify()

    async def find_by_name(self, name: str) -> Optional[PokemonRecord]:
        self._check_open()
        record_id = self._ids_by_name.get(name.lower())
        if record_id is None:
            return None
        return self._records.get(record_id)

    async def find_all(self) -> List[PokemonRecord]:
        self._check_open()
        return [self._records[k] for k in sorted(self._records)]

    async def delete_by_name(self, name: str) -> bool:
        self._check_open()
        async with self._lock:
            record_id = self._ids_by_name.pop(name.lower(), None)
            if record_id is None:
                return False
            self._records.pop(record_id, None)
        await self._notify()
        return True

    async def delete_all(self) -> None:
        self._check_open()
        async with self._lock:
            self._records.clear()
            self._ids_by_name.clear()
        await self._notify()

    async def count(self) -> int:
        self._check_open()
        return len(self._records)

    async def close(self) -> None:
        self._closed = True
