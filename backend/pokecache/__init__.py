# backend/pokecache/__init__.py

from .batch import BatchOrchestrator
from .display import to_display_model, to_record
from .exceptions import (
    InvalidArgumentError, MalformedRecordError, MalformedResponseError, PokeAPIError,
    PokeCacheError, ResourceNotFoundError, StoreError, TransientFetchError,
)
from .models import BatchFailure, BatchResult, PokemonDisplay, PokemonRecord, StatEntry, TypeSlot
from .normalizer import normalize
from .pokeapi_client import PokeAPIClient
from .redis_store import RedisRecordStore
from .repository import PokemonRepository
from .store import InMemoryRecordStore, RecordStore

__all__ = [
    # Core
    "PokemonRepository", "BatchOrchestrator", "normalize", "to_display_model", "to_record",
    # Collaborators
    "PokeAPIClient", "RecordStore", "InMemoryRecordStore", "RedisRecordStore",
    # Models
    "PokemonRecord", "PokemonDisplay", "TypeSlot", "StatEntry", "BatchResult", "BatchFailure",
    # Exceptions
    "PokeCacheError", "InvalidArgumentError", "PokeAPIError", "ResourceNotFoundError",
    "TransientFetchError", "MalformedResponseError", "MalformedRecordError", "StoreError",
]

__version__ = "1.0.0"
