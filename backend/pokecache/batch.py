# backend/pokecache/batch.py

import asyncio
import logging
from typing import Any, Iterable, List, Optional, Tuple, Union

from .exceptions import InvalidArgumentError
from .models import BatchFailure, BatchResult, PokemonRecord
from .repository import PokemonRepository

logger = logging.getLogger(__name__)

Outcome = Tuple[str, Union[PokemonRecord, Exception]]


def _validate_names(names: Any) -> List[str]:
    if names is None or isinstance(names, (str, bytes)):
        raise InvalidArgumentError(f"names must be a list of strings, got {type(names).__name__}")
    try:
        items = list(names)
    except TypeError as e:
        raise InvalidArgumentError(f"names must be iterable, got {type(names).__name__}") from e
    bad = [n for n in items if not isinstance(n, str)]
    if bad:
        raise InvalidArgumentError(f"names must contain only strings, got {bad[0]!r}")
    return items


class BatchOrchestrator:
    """Runs repository.get over many names, isolating per-name failures."""

    def __init__(self, repository: PokemonRepository, concurrency: int = 8,
                 preload_names: Optional[List[str]] = None):
        if concurrency < 1:
            raise InvalidArgumentError("concurrency must be at least 1")
        self.repository = repository
        self.concurrency = concurrency
        self.preload_names = list(preload_names or [])

    async def fetch_all(self, names: Iterable[str]) -> BatchResult:
        """
        Fetches every non-blank name through the cache.

        Blank names are dropped. Fetches run concurrently (bounded by
        `concurrency`) and are never cancelled; results land in completion order.
        Only a structurally invalid `names` raises InvalidArgumentError.
        """
        to_fetch = [n for n in _validate_names(names) if n.strip()]
        semaphore = asyncio.Semaphore(self.concurrency)

        async def fetch_one(name: str) -> Outcome:
            async with semaphore:
                try:
                    return name, await self.repository.get(name)
                except Exception as e:
                    logger.warning(f"Batch fetch failed for '{name}': {type(e).__name__}: {e}")
                    return name, e

        result = BatchResult()
        for next_done in asyncio.as_completed([fetch_one(n) for n in to_fetch]):
            name, outcome = await next_done
            if isinstance(outcome, Exception):
                result.failed.append(BatchFailure(name=name, error=outcome))
            else:
                result.succeeded.append(outcome)

        logger.info(f"Batch of {len(to_fetch)} names finished: {result.summary()}")
        return result

    async def preload(self) -> BatchResult:
        """Fetches the configured starter names (no-op on names already cached)."""
        logger.info(f"Preloading {len(self.preload_names)} Pokémon...")
        return await self.fetch_all(self.preload_names)
