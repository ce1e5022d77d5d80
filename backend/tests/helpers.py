# backend/tests/helpers.py

BASE_URL = "https://pokeapi.co/api/v2"


def pokemon_payload(pokemon_id: int, name: str, types=("electric",), stats=(("hp", 35), ("speed", 90)), **extra):
    """A /pokemon response trimmed to what matters, plus a few fields the cache ignores."""
    payload = {
        "id": pokemon_id,
        "name": name,
        "height": 4,
        "weight": 60,
        "base_experience": 112,
        "is_default": True,
        "sprites": {
            "front_default": f"https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/{pokemon_id}.png",
            "other": {"official-artwork": {"front_default": "..."}},
        },
        "types": [
            {"slot": i, "type": {"name": t, "url": f"{BASE_URL}/type/{i}/"}}
            for i, t in enumerate(types, start=1)
        ],
        "stats": [
            {"stat": {"name": s, "url": "..."}, "base_stat": v, "effort": 0}
            for s, v in stats
        ],
        "abilities": [{"slot": 1, "is_hidden": False, "ability": {"name": "static", "url": "..."}}],
    }
    payload.update(extra)
    return payload


PIKACHU = pokemon_payload(25, "pikachu")
BULBASAUR = pokemon_payload(1, "bulbasaur", types=("grass", "poison"), stats=(("hp", 45), ("attack", 49)))
