# backend/pokecache/events.py

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, List

from .models import PokemonRecord

logger = logging.getLogger(__name__)

Snapshot = List[PokemonRecord]


class RecordFeed:
    """Fans out full-list snapshots to every subscriber after each store mutation."""

    def __init__(self, max_queue_size: int = 100) -> None:
        self._subscribers: List[asyncio.Queue] = []
        self._max_queue_size = max_queue_size

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def publish(self, snapshot: Snapshot) -> None:
        for queue in self._subscribers:
            if queue.full():
                # Slow consumer: drop its oldest snapshot, only the latest matters
                queue.get_nowait()
                logger.warning("Record feed queue full, dropping oldest snapshot")
            queue.put_nowait(list(snapshot))

    async def stream(self, current: Callable[[], Awaitable[Snapshot]]) -> AsyncIterator[Snapshot]:
        """Yields the current list, then a fresh list after every mutation."""
        queue = self.subscribe()
        try:
            yield await current()
            while True:
                yield await queue.get()
        finally:
            self.unsubscribe(queue)
