# backend/pokecache/main.py

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from typing import List, Optional

from pydantic import BaseModel

from .batch import BatchOrchestrator
from .config import Settings, settings as default_settings
from .display import to_display_model
from .exceptions import (
    InvalidArgumentError,
    MalformedRecordError,
    MalformedResponseError,
    PokeAPIError,
    ResourceNotFoundError,
    StoreError,
    TransientFetchError,
)
from .models import PokemonDisplay, PokemonRecord
from .pokeapi_client import PokeAPIClient
from .redis_store import RedisRecordStore
from .repository import PokemonRepository
from .store import InMemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

ERROR_STATUS = [
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND),
    (TransientFetchError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (PokeAPIError, status.HTTP_502_BAD_GATEWAY),
    (MalformedResponseError, status.HTTP_502_BAD_GATEWAY),
    (MalformedRecordError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (StoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


class BatchRequest(BaseModel):
    names: List[str]

class BatchFailureOut(BaseModel):
    name: str
    error_type: str
    message: str

class BatchResponse(BaseModel):
    succeeded: List[PokemonRecord]
    failed: List[BatchFailureOut]
    summary: str


def build_store(config: Settings) -> RecordStore:
    if config.store_backend == "redis":
        return RedisRecordStore.from_url(
            config.redis_url,
            key_prefix=config.redis_key_prefix,
            max_connections=config.redis_max_connections,
        )
    return InMemoryRecordStore()


def create_app(config: Optional[Settings] = None, repository: Optional[PokemonRepository] = None) -> FastAPI:
    """
    Builds the API. When `repository` is given it is used as-is and its
    resources are left for the caller to close.
    """
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup...")
        owned = getattr(app.state, "repository", None) is None
        if owned:
            store = build_store(config)
            remote = PokeAPIClient.from_settings(config)
            app.state.repository = PokemonRepository(store, remote)
            logger.info(f"Record store '{config.store_backend}' and PokeAPI client initialized.")

        if config.preload_on_startup:
            repo: PokemonRepository = app.state.repository
            if await repo.store.count() == 0:
                logger.warning("CACHE POPULATION STARTING (startup): record store is empty.")
                result = await BatchOrchestrator(repo, config.batch_concurrency, config.preload_names).preload()
                logger.info(f"CACHE POPULATION COMPLETED (startup): {result.summary()}")

        yield # Application runs here

        logger.info("Application shutdown...")
        if owned:
            repo = app.state.repository
            await repo.store.close()
            await repo.remote.aclose()
            app.state.repository = None
            logger.info("Resources cleaned up.")

    app = FastAPI(
        title="Pokécache API",
        description="Fetch-through cache of Pokémon records from PokeAPI",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.repository = repository

    def _make_handler(code: int):
        async def handler(request: Request, exc: Exception):
            logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
            return JSONResponse(status_code=code, content={"detail": str(exc), "error": type(exc).__name__})
        return handler

    for exc_class, code in ERROR_STATUS:
        app.add_exception_handler(exc_class, _make_handler(code))

    _register_routes(app)
    return app


def get_repository(request: Request) -> PokemonRepository:
    repo = getattr(request.app.state, "repository", None)
    if repo is None:
        raise StoreError("Record store is not initialized.")
    return repo

def get_batch(request: Request, repo: PokemonRepository = Depends(get_repository)) -> BatchOrchestrator:
    config: Settings = request.app.state.settings
    return BatchOrchestrator(repo, config.batch_concurrency, config.preload_names)


def _register_routes(app: FastAPI) -> None:

    @app.get("/")
    async def read_root(request: Request):
        """ Basic root endpoint to check if the API is running. """
        return {
            "message": "Welcome to the Pokécache API!",
            "documentation": "/docs",
            "store_backend": request.app.state.settings.store_backend,
        }

    @app.get("/api/pokemon", response_model=List[PokemonRecord], tags=["Pokemon"],
             summary="List all cached Pokémon")
    async def list_pokemon(repo: PokemonRepository = Depends(get_repository)):
        return await repo.list_all()

    @app.get("/api/pokemon/search", response_model=List[PokemonRecord], tags=["Pokemon"],
             summary="Search cached Pokémon by name fragment")
    async def search_pokemon(q: str = Query("", description="Name fragment, case-insensitive."),
                             repo: PokemonRepository = Depends(get_repository)):
        return await repo.search_local(q)

    @app.post("/api/pokemon/batch", response_model=BatchResponse, tags=["Pokemon"],
              summary="Fetch many Pokémon through the cache")
    async def batch_fetch(body: BatchRequest, batch: BatchOrchestrator = Depends(get_batch)):
        result = await batch.fetch_all(body.names)
        return BatchResponse(
            succeeded=result.succeeded,
            failed=[BatchFailureOut(name=f.name, error_type=type(f.error).__name__, message=str(f.error))
                    for f in result.failed],
            summary=result.summary(),
        )

    @app.get("/api/pokemon/{name}", response_model=PokemonRecord, tags=["Pokemon"],
             summary="Get a Pokémon, fetching it from PokeAPI on a cache miss")
    async def get_pokemon(name: str,
                          force_refresh: bool = Query(False, description="Re-fetch from PokeAPI even if cached."),
                          repo: PokemonRepository = Depends(get_repository)):
        logger.info(f"Received request for Pokémon '{name}'. force_refresh={force_refresh}")
        if force_refresh:
            return await repo.refresh(name)
        return await repo.get(name)

    @app.get("/api/pokemon/{name}/local", response_model=PokemonRecord, tags=["Pokemon"],
             summary="Get a Pokémon from the cache only")
    async def get_pokemon_local(name: str, repo: PokemonRepository = Depends(get_repository)):
        record = await repo.get_local_only(name)
        if record is None:
            raise ResourceNotFoundError(f"Pokémon '{name.strip().lower()}' is not cached.", status_code=404)
        return record

    @app.get("/api/pokemon/{name}/display", response_model=PokemonDisplay, tags=["Pokemon"],
             summary="Get the display model of a Pokémon")
    async def get_pokemon_display(name: str, repo: PokemonRepository = Depends(get_repository)):
        return to_display_model(await repo.get(name))

    @app.delete("/api/pokemon/{name}", status_code=status.HTTP_204_NO_CONTENT, tags=["Pokemon"])
    async def delete_pokemon(name: str, repo: PokemonRepository = Depends(get_repository)):
        await repo.delete(name)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.delete("/api/pokemon", status_code=status.HTTP_204_NO_CONTENT, tags=["Pokemon"])
    async def clear_pokemon(repo: PokemonRepository = Depends(get_repository)):
        await repo.clear()
        return Response(status_code=status.HTTP_204_NO_CONTENT)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def build_app() -> FastAPI:
    """Entry point for `uvicorn pokecache.main:build_app --factory`."""
    configure_logging(default_settings.log_level)
    return create_app(default_settings)
