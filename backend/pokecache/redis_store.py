# backend/pokecache/redis_store.py

import redis.asyncio as redis
import logging
from typing import List, Optional

from pydantic import ValidationError

from .exceptions import MalformedRecordError, StoreError
from .models import PokemonRecord
from .store import RecordStore

logger = logging.getLogger(__name__)


class RedisRecordStore(RecordStore):
    """
    Record store backed by two Redis hashes:

        {prefix}:records  id -> record JSON
        {prefix}:names    lower-cased name -> id

    Writes touch both hashes inside a single MULTI/EXEC pipeline.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "pokecache"):
        super().__init__()
        self._redis = client
        self._records_key = f"{key_prefix}:records"
        self._names_key = f"{key_prefix}:names"

    @classmethod
    def from_url(cls, redis_url: str, key_prefix: str = "pokecache", max_connections: int = 20) -> "RedisRecordStore":
        """Creates a store over a new asynchronous connection pool."""
        logger.info(f"Attempting to connect to Redis at: {redis_url}")
        pool = redis.ConnectionPool.from_url(
            redis_url,
            decode_responses=True,
            max_connections=max_connections,
        )
        logger.info("Redis connection pool created successfully.")
        return cls(redis.Redis(connection_pool=pool), key_prefix=key_prefix)

    def _parse(self, raw: str) -> PokemonRecord:
        try:
            return PokemonRecord.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedRecordError(f"Corrupt record row in {self._records_key}: {e}") from e

    def _stored_name(self, raw: str) -> Optional[str]:
        """Lower-cased name of a stored row, or None if the row cannot be parsed."""
        try:
            return self._parse(raw).name.lower()
        except MalformedRecordError:
            logger.warning(f"Unparsable row in {self._records_key}, ignoring its name")
            return None

    async def insert_or_replace(self, record: PokemonRecord) -> None:
        new_name = record.name.lower()
        try:
            previous = await self._redis.hget(self._records_key, str(record.id))
            old_name = self._stored_name(previous) if previous is not None else None
            async with self._redis.pipeline(transaction=True) as pipe:
                if old_name is not None and old_name != new_name:
                    pipe.hdel(self._names_key, old_name)
                pipe.hset(self._records_key, str(record.id), record.model_dump_json())
                pipe.hset(self._names_key, new_name, str(record.id))
                await pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Redis write error for record {record.id}: {e}", exc_info=True)
            raise StoreError(f"Failed to store record {record.id}: {e}") from e
        logger.debug(f"Stored record {record.id} ('{record.name}') in Redis")
        await self._notify()

    async def find_by_name(self, name: str) -> Optional[PokemonRecord]:
        key = name.lower()
        try:
            record_id = await self._redis.hget(self._names_key, key)
            if record_id is None:
                return None
            raw = await self._redis.hget(self._records_key, record_id)
        except redis.RedisError as e:
            logger.error(f"Redis read error for name '{key}': {e}", exc_info=True)
            raise StoreError(f"Failed to read record '{key}': {e}") from e
        if raw is None:
            return None
        record = self._parse(raw)
        # The id may since have been replaced by a record under another name
        if record.name.lower() != key:
            return None
        return record

    async def find_all(self) -> List[PokemonRecord]:
        try:
            rows = await self._redis.hvals(self._records_key)
        except redis.RedisError as e:
            logger.error(f"Redis HVALS error: {e}", exc_info=True)
            raise StoreError(f"Failed to list records: {e}") from e
        return sorted((self._parse(raw) for raw in rows), key=lambda r: r.id)

    async def delete_by_name(self, name: str) -> bool:
        key = name.lower()
        try:
            record_id = await self._redis.hget(self._names_key, key)
            if record_id is None:
                return False
            raw = await self._redis.hget(self._records_key, record_id)
            # A corrupt row indexed under this name still belongs to it
            owned = raw is not None and self._stored_name(raw) in (key, None)
            async with self._redis.pipeline(transaction=True) as pipe:
                if owned:
                    pipe.hdel(self._records_key, record_id)
                pipe.hdel(self._names_key, key)
                await pipe.execute()
            if not owned:
                return False
        except redis.RedisError as e:
            logger.error(f"Redis DELETE error for name '{key}': {e}", exc_info=True)
            raise StoreError(f"Failed to delete record '{key}': {e}") from e
        await self._notify()
        return True

    async def delete_all(self) -> None:
        try:
            await self._redis.delete(self._records_key, self._names_key)
        except redis.RedisError as e:
            logger.error(f"Redis DELETE error while clearing: {e}", exc_info=True)
            raise StoreError(f"Failed to clear records: {e}") from e
        await self._notify()

    async def count(self) -> int:
        try:
            return await self._redis.hlen(self._records_key)
        except redis.RedisError as e:
            raise StoreError(f"Failed to count records: {e}") from e

    async def close(self) -> None:
        await self._redis.aclose(close_connection_pool=True)
        logger.info("Redis connection closed.")
