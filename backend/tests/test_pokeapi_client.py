# backend/tests/test_pokeapi_client.py

import httpx
import pytest

from pokecache.exceptions import (
    MalformedResponseError,
    PokeAPIError,
    ResourceNotFoundError,
    TransientFetchError,
)

from .helpers import BASE_URL, PIKACHU


@pytest.mark.asyncio
async def test_fetch_by_name_returns_json(remote, pikachu_route):
    data = await remote.fetch_by_name("pikachu")
    assert data["id"] == 25
    assert pikachu_route.call_count == 1


@pytest.mark.asyncio
async def test_404_raises_resource_not_found(remote, pokeapi_mock):
    pokeapi_mock.get(f"{BASE_URL}/pokemon/notapokemon").mock(return_value=httpx.Response(404))
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await remote.fetch_by_name("notapokemon")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [429, 500, 503])
async def test_server_errors_are_transient(remote, pokeapi_mock, status_code):
    pokeapi_mock.get(f"{BASE_URL}/pokemon/pikachu").mock(return_value=httpx.Response(status_code))
    with pytest.raises(TransientFetchError) as exc_info:
        await remote.fetch_by_name("pikachu")
    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_other_client_errors_are_plain_pokeapi_errors(remote, pokeapi_mock):
    pokeapi_mock.get(f"{BASE_URL}/pokemon/pikachu").mock(return_value=httpx.Response(403))
    with pytest.raises(PokeAPIError) as exc_info:
        await remote.fetch_by_name("pikachu")
    assert not isinstance(exc_info.value, TransientFetchError)


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [httpx.ConnectError("connection refused"), httpx.ReadTimeout("too slow")])
async def test_network_failures_are_transient(remote, pokeapi_mock, error):
    pokeapi_mock.get(f"{BASE_URL}/pokemon/pikachu").mock(side_effect=error)
    with pytest.raises(TransientFetchError):
        await remote.fetch_by_name("pikachu")


@pytest.mark.asyncio
async def test_non_json_body_is_malformed(remote, pokeapi_mock):
    pokeapi_mock.get(f"{BASE_URL}/pokemon/pikachu").mock(return_value=httpx.Response(200, text="<html>"))
    with pytest.raises(MalformedResponseError):
        await remote.fetch_by_name("pikachu")


@pytest.mark.asyncio
async def test_json_array_body_is_malformed(remote, pokeapi_mock):
    pokeapi_mock.get(f"{BASE_URL}/pokemon/pikachu").mock(return_value=httpx.Response(200, json=[PIKACHU]))
    with pytest.raises(MalformedResponseError):
        await remote.fetch_by_name("pikachu")


@pytest.mark.asyncio
async def test_names_are_path_escaped(remote, pokeapi_mock):
    route = pokeapi_mock.get(url__regex=r"https://pokeapi\.co/api/v2/pokemon/mr%20mime$").mock(return_value=httpx.Response(200, json={"id": 122}))
    await remote.fetch_by_name("mr mime")
    assert route.called


@pytest.mark.asyncio
async def test_pass_through_endpoints(remote, pokeapi_mock):
    species = pokeapi_mock.get(f"{BASE_URL}/pokemon-species/pikachu").mock(
        return_value=httpx.Response(200, json={"id": 25, "evolution_chain": {"url": f"{BASE_URL}/evolution-chain/10/"}}))
    chain = pokeapi_mock.get(f"{BASE_URL}/evolution-chain/10").mock(
        return_value=httpx.Response(200, json={"id": 10, "chain": {}}))
    type_info = pokeapi_mock.get(f"{BASE_URL}/type/13").mock(
        return_value=httpx.Response(200, json={"id": 13, "name": "electric"}))

    assert (await remote.fetch_species("pikachu"))["id"] == 25
    assert (await remote.fetch_evolution_chain(10))["id"] == 10
    assert (await remote.fetch_type(13))["name"] == "electric"
    assert species.called and chain.called and type_info.called
