# backend/tests/conftest.py

import httpx
import pytest
import pytest_asyncio
import respx

from pokecache.config import Settings
from pokecache.pokeapi_client import PokeAPIClient
from pokecache.repository import PokemonRepository
from pokecache.store import InMemoryRecordStore

from .helpers import BASE_URL, PIKACHU


@pytest.fixture
def settings():
    return Settings(pokeapi_base_url=BASE_URL, store_backend="memory", batch_concurrency=4)


@pytest.fixture
def pokeapi_mock():
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def pikachu_route(pokeapi_mock):
    return pokeapi_mock.get(f"{BASE_URL}/pokemon/pikachu").mock(return_value=httpx.Response(200, json=PIKACHU))


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest_asyncio.fixture
async def remote(settings):
    client = PokeAPIClient.from_settings(settings)
    yield client
    await client.aclose()


@pytest.fixture
def repository(store, remote):
    return PokemonRepository(store, remote)
