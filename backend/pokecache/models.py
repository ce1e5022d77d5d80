# backend/pokecache/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# --- Remote (PokeAPI) payload models ---
# Only the fields the cache needs; anything else in the payload is ignored.

class TypeInfo(BaseModel):
    """Represents basic info about a Pokemon Type."""
    name: str
    url: Optional[str] = None

class PokemonTypeSlot(BaseModel):
    slot: int
    type: TypeInfo

class StatInfo(BaseModel):
    name: str
    url: Optional[str] = None

class PokemonStatData(BaseModel):
    stat: StatInfo
    base_stat: int
    effort: Optional[int] = None

class SpriteData(BaseModel):
    front_default: Optional[str] = None

class RemotePokemon(BaseModel):
    """The subset of a /pokemon/{name} response that gets cached."""
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = Field(..., min_length=1)
    sprites: SpriteData = Field(default_factory=SpriteData)
    types: List[PokemonTypeSlot] = Field(default_factory=list)
    stats: List[PokemonStatData] = Field(default_factory=list)

# --- Stored shapes ---

class TypeSlot(BaseModel):
    """One entry of a record's serialized type list."""
    slot: int = Field(..., description="Slot order of the type (1 = primary)")
    type_name: str = Field(..., description="Name of the type, e.g. 'electric'")

class StatEntry(BaseModel):
    """One entry of a record's serialized stat list."""
    stat_name: str = Field(..., description="Name of the stat (e.g., 'hp', 'attack')")
    base_value: int = Field(..., description="Base stat value")

class PokemonRecord(BaseModel):
    """A cached Pokémon row. Immutable; replaced wholesale on re-fetch."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Pokémon ID, primary identity")
    name: str = Field(..., description="Pokémon name, matched case-insensitively")
    image_url: str = Field("", description="Default front sprite URL, empty if none")
    types: str = Field(..., description="JSON array of {slot, type_name}")
    stats: str = Field(..., description="JSON array of {stat_name, base_value}")

class PokemonDisplay(BaseModel):
    """What a presentation layer renders for one Pokémon."""
    id: int
    name: str
    image_url: str = ""
    types: List[TypeSlot]
    stats: List[StatEntry]
    # Not retained by PokemonRecord; always 0 when built from one
    height: int = 0
    weight: int = 0
    base_experience: int = 0

    @property
    def display_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]

# --- Batch results ---

class BatchFailure(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    error: Exception

class BatchResult(BaseModel):
    """Outcome of a batch fetch, in completion order."""
    succeeded: List[PokemonRecord] = Field(default_factory=list)
    failed: List[BatchFailure] = Field(default_factory=list)

    def summary(self) -> str:
        return f"{len(self.succeeded)} succeeded, {len(self.failed)} failed"
