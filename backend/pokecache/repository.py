# backend/pokecache/repository.py

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol

from .exceptions import InvalidArgumentError
from .models import PokemonRecord
from .normalizer import normalize
from .store import RecordStore

logger = logging.getLogger(__name__)


class RemoteSource(Protocol):
    async def fetch_by_name(self, name: str) -> Dict[str, Any]: ...
    async def fetch_species(self, name: str) -> Dict[str, Any]: ...
    async def fetch_evolution_chain(self, chain_id: int) -> Dict[str, Any]: ...
    async def fetch_type(self, type_id: int) -> Dict[str, Any]: ...
    async def aclose(self) -> None: ...


def normalize_name(name: Any) -> str:
    """Trims and lower-cases a lookup key, rejecting blank or non-string input."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"Pokémon name must be a non-blank string, got {name!r}")
    return name.strip().lower()


class PokemonRepository:
    """
    Single source of truth for Pokémon records.

    Serves from the record store when possible and otherwise fetches from the
    remote source, normalizes, stores and returns. Errors from either side
    propagate unchanged; nothing is retried.
    """

    def __init__(self, store: RecordStore, remote: RemoteSource):
        self.store = store
        self.remote = remote

    async def get(self, name: str) -> PokemonRecord:
        """
        Returns the cached record for `name`, fetching and storing it on a miss.

        Args:
            name: Pokémon name, any case; surrounding whitespace is ignored.

        Raises:
            InvalidArgumentError: blank name (raised before any I/O).
            PokeAPIError / MalformedResponseError / StoreError: propagated as-is.
        """
        key = normalize_name(name)
        cached = await self.store.find_by_name(key)
        if cached is not None:
            logger.debug(f"Cache HIT for '{key}'")
            return cached
        logger.debug(f"Cache MISS for '{key}'")
        return await self._fetch_and_store(key)

    async def refresh(self, name: str) -> PokemonRecord:
        """Re-fetches `name` and replaces whatever is cached, hit or not."""
        return await self._fetch_and_store(normalize_name(name))

    async def _fetch_and_store(self, key: str) -> PokemonRecord:
        logger.info(f"Fetching fresh Pokémon data for '{key}' from PokeAPI...")
        payload = await self.remote.fetch_by_name(key)
        record = normalize(payload)
        await self.store.insert_or_replace(record)
        logger.info(f"Cached '{record.name}' (ID: {record.id})")
        return record

    async def get_local_only(self, name: str) -> Optional[PokemonRecord]:
        return await self.store.find_by_name(normalize_name(name))

    async def exists(self, name: str) -> bool:
        return await self.get_local_only(name) is not None

    async def delete(self, name: str) -> None:
        key = normalize_name(name)
        if await self.store.delete_by_name(key):
            logger.info(f"Deleted cached record for '{key}'")
        else:
            logger.debug(f"No cached record to delete for '{key}'")

    async def clear(self) -> None:
        await self.store.delete_all()
        logger.info("Cleared all cached Pokémon records.")

    async def list_all(self) -> List[PokemonRecord]:
        return await self.store.find_all()

    async def search_local(self, query: str) -> List[PokemonRecord]:
        """Cached records whose name contains `query` (case-insensitive)."""
        if not isinstance(query, str) or not query.strip():
            return []
        needle = query.strip().lower()
        records = await self.store.find_all()
        matches = [r for r in records if needle in r.name.lower()]
        logger.debug(f"Local search for '{needle}' found {len(matches)} results.")
        return matches

    def watch(self) -> AsyncIterator[List[PokemonRecord]]:
        return self.store.watch()

    # --- Uncached pass-throughs ---

    async def get_species(self, name: str) -> Dict[str, Any]:
        return await self.remote.fetch_species(normalize_name(name))

    async def get_evolution_chain(self, chain_id: int) -> Dict[str, Any]:
        return await self.remote.fetch_evolution_chain(chain_id)

    async def get_type_info(self, type_id: int) -> Dict[str, Any]:
        return await self.remote.fetch_type(type_id)
