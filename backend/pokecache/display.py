# backend/pokecache/display.py

from .models import PokemonDisplay, PokemonRecord
from .normalizer import decode_stats, decode_types, encode_stats, encode_types


def to_display_model(record: PokemonRecord) -> PokemonDisplay:
    """
    Expands a cached record into the shape the presentation layer renders.

    Height, weight and base experience are not cached and come back as 0.
    Raises MalformedRecordError if the types or stats blob is corrupt; callers
    are expected to render a placeholder in that case.
    """
    return PokemonDisplay(
        id=record.id,
        name=record.name,
        image_url=record.image_url,
        types=decode_types(record.types),
        stats=decode_stats(record.stats),
    )


def to_record(display: PokemonDisplay) -> PokemonRecord:
    return PokemonRecord(
        id=display.id,
        name=display.name,
        image_url=display.image_url,
        types=encode_types(display.types),
        stats=encode_stats(display.stats),
    )
