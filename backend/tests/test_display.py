# backend/tests/test_display.py

import pytest

from pokecache.display import to_display_model, to_record
from pokecache.exceptions import MalformedRecordError
from pokecache.models import PokemonRecord, StatEntry, TypeSlot
from pokecache.normalizer import normalize

from .helpers import BULBASAUR, PIKACHU


@pytest.mark.parametrize("payload", [PIKACHU, BULBASAUR])
def test_round_trip_through_display_model(payload):
    record = normalize(payload)
    assert to_record(to_display_model(record)) == record


def test_display_model_decodes_lists_and_defaults_measurements():
    display = to_display_model(normalize(BULBASAUR))
    assert display.types == [TypeSlot(slot=1, type_name="grass"), TypeSlot(slot=2, type_name="poison")]
    assert display.stats[0] == StatEntry(stat_name="hp", base_value=45)
    # Not cached, so never taken from the payload
    assert (display.height, display.weight, display.base_experience) == (0, 0, 0)
    assert display.display_name == "Bulbasaur"


def test_corrupt_types_blob_raises_malformed_record():
    record = PokemonRecord(id=25, name="pikachu", image_url="", types="{{not json", stats="[]")
    with pytest.raises(MalformedRecordError):
        to_display_model(record)


def test_corrupt_stats_blob_raises_malformed_record():
    good = normalize(PIKACHU)
    record = good.model_copy(update={"stats": '[{"stat_name": 5}]'})
    with pytest.raises(MalformedRecordError):
        to_display_model(record)
