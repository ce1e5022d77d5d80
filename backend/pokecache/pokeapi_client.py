# backend/pokecache/pokeapi_client.py

import httpx
import logging
from typing import Dict, Any
from urllib.parse import quote

from .config import Settings
from .exceptions import (
    MalformedResponseError,
    PokeAPIError,
    ResourceNotFoundError,
    TransientFetchError,
)

logger = logging.getLogger(__name__)


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Creates the pooled httpx client used to talk to PokeAPI."""
    return httpx.AsyncClient(
        base_url=settings.pokeapi_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds, connect=settings.http_connect_timeout_seconds),
        follow_redirects=True,
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20)
    )


class PokeAPIClient:
    """Read-only remote source for PokeAPI v2 resources."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "PokeAPIClient":
        return cls(create_http_client(settings))

    async def aclose(self):
        if not self._client.is_closed:
            await self._client.aclose()
            logger.info("PokeAPI httpx client closed.")

    async def fetch_by_name(self, name: str) -> Dict[str, Any]:
        """Fetches /pokemon/{name}."""
        return await self._fetch(f"/pokemon/{quote(name, safe='')}")

    async def fetch_species(self, name: str) -> Dict[str, Any]:
        return await self._fetch(f"/pokemon-species/{quote(name, safe='')}")

    async def fetch_evolution_chain(self, chain_id: int) -> Dict[str, Any]:
        return await self._fetch(f"/evolution-chain/{int(chain_id)}")

    async def fetch_type(self, type_id: int) -> Dict[str, Any]:
        return await self._fetch(f"/type/{int(type_id)}")

    async def _fetch(self, endpoint: str) -> Dict[str, Any]:
        """
        Fetches data from a specific PokeAPI endpoint.

        Args:
            endpoint: The API endpoint path relative to the base URL (e.g., "/pokemon/pikachu").

        Returns:
            The decoded JSON object.

        Raises:
            ResourceNotFoundError: 404 from PokeAPI.
            TransientFetchError: timeout, connection failure, 429 or 5xx.
            PokeAPIError: any other non-success status.
            MalformedResponseError: body is not a JSON object.
        """
        logger.debug(f"Fetching data from PokeAPI: {endpoint}")
        try:
            response = await self._client.get(endpoint)
            response.raise_for_status() # Raise an exception for 4xx or 5xx status codes
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out for PokeAPI endpoint: {endpoint}")
            raise TransientFetchError(f"Request timed out for {endpoint}") from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code == 404:
                logger.warning(f"Resource not found at {e.request.url!r}")
                raise ResourceNotFoundError(f"Resource not found: {endpoint}", status_code=404) from e
            logger.error(f"HTTP error occurred: {status_code} {e.response.reason_phrase} for url {e.request.url!r}")
            if status_code == 429 or status_code >= 500:
                raise TransientFetchError(f"PokeAPI returned {status_code} for {endpoint}", status_code=status_code) from e
            raise PokeAPIError(f"PokeAPI returned {status_code} for {endpoint}", status_code=status_code) from e
        except httpx.RequestError as e:
            logger.error(f"An error occurred while requesting {endpoint!r}: {e}")
            raise TransientFetchError(f"Network error for {endpoint}: {e}") from e

        try:
            data: Any = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"PokeAPI returned invalid JSON for {endpoint}") from e
        if not isinstance(data, dict):
            raise MalformedResponseError(f"PokeAPI returned {type(data).__name__} instead of an object for {endpoint}")
        logger.debug(f"Successfully fetched data from {endpoint}, status: {response.status_code}")
        return data
