# backend/pokecache/normalizer.py

import logging
from typing import Any, List, Mapping

from pydantic import TypeAdapter, ValidationError

from .exceptions import MalformedRecordError, MalformedResponseError
from .models import PokemonRecord, RemotePokemon, StatEntry, TypeSlot

logger = logging.getLogger(__name__)

_types_adapter = TypeAdapter(List[TypeSlot])
_stats_adapter = TypeAdapter(List[StatEntry])

# --- Blob encoding ---
# Compact JSON arrays in remote order, e.g.
#   types: [{"slot":1,"type_name":"electric"}]
#   stats: [{"stat_name":"hp","base_value":35}]

def encode_types(types: List[TypeSlot]) -> str:
    return _types_adapter.dump_json(types).decode("utf-8")

def encode_stats(stats: List[StatEntry]) -> str:
    return _stats_adapter.dump_json(stats).decode("utf-8")

def decode_types(blob: str) -> List[TypeSlot]:
    """Parses a record's types blob, raising MalformedRecordError if it is corrupt."""
    try:
        return _types_adapter.validate_json(blob)
    except ValidationError as e:
        raise MalformedRecordError(f"Corrupt types blob: {e.errors()[0]['msg']}") from e

def decode_stats(blob: str) -> List[StatEntry]:
    """Parses a record's stats blob, raising MalformedRecordError if it is corrupt."""
    try:
        return _stats_adapter.validate_json(blob)
    except ValidationError as e:
        raise MalformedRecordError(f"Corrupt stats blob: {e.errors()[0]['msg']}") from e


def normalize(payload: Mapping[str, Any]) -> PokemonRecord:
    """
    Converts a PokeAPI /pokemon response into a storable record.

    Args:
        payload: The decoded JSON body. Unknown fields are ignored.

    Returns:
        A PokemonRecord with the type and stat lists serialized into blobs.

    Raises:
        MalformedResponseError: id/name missing, or type/stat entries of the wrong shape.
    """
    if not isinstance(payload, Mapping):
        raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        remote = RemotePokemon.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        logger.warning(f"Rejecting malformed PokeAPI payload (invalid: {fields})")
        raise MalformedResponseError(f"Malformed Pokémon payload, invalid fields: {fields}") from e

    types = [TypeSlot(slot=t.slot, type_name=t.type.name) for t in remote.types]
    stats = [StatEntry(stat_name=s.stat.name, base_value=s.base_stat) for s in remote.stats]

    return PokemonRecord(
        id=remote.id,
        name=remote.name,
        image_url=remote.sprites.front_default or "",
        types=encode_types(types),
        stats=encode_stats(stats),
    )
