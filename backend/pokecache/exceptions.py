# backend/pokecache/exceptions.py
from typing import Optional


class PokeCacheError(Exception):
    """Base class for every error raised by pokecache."""


class InvalidArgumentError(PokeCacheError, ValueError):
    """Blank or malformed input, rejected before any I/O."""


class PokeAPIError(PokeCacheError):
    """The remote catalog could not deliver a resource."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResourceNotFoundError(PokeAPIError):
    """The remote catalog has no resource with that name or id."""


class TransientFetchError(PokeAPIError):
    """Network failure, timeout or server-side error. Retryable by the caller."""


class MalformedResponseError(PokeCacheError):
    """The remote payload is missing required fields or has the wrong shape."""


class MalformedRecordError(PokeCacheError):
    """A stored record or one of its serialized blobs cannot be decoded."""


class StoreError(PokeCacheError):
    """The record store backend failed."""
