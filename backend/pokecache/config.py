# backend/pokecache/config.py

import os
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
# Useful for local development
env_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
load_dotenv(dotenv_path=env_path)

DEFAULT_PRELOAD_NAMES = [
    "bulbasaur", "ivysaur", "venusaur", "charmander",
    "charmeleon", "charizard", "squirtle", "wartortle",
    "blastoise", "caterpie",
]

class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file_encoding='utf-8')

    # Redis configuration (only used when store_backend == "redis")
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "pokecache"
    redis_max_connections: int = 20

    # PokeAPI base URL
    pokeapi_base_url: str = "https://pokeapi.co/api/v2"
    http_timeout_seconds: float = 10.0
    http_connect_timeout_seconds: float = 5.0

    # Where cached records live: in-process dict or Redis hashes
    store_backend: Literal["memory", "redis"] = "memory"

    # Max concurrent fetches per batch
    batch_concurrency: int = 8

    # Names fetched by the preload batch (and at startup if preload_on_startup)
    preload_names: List[str] = DEFAULT_PRELOAD_NAMES
    preload_on_startup: bool = False

    log_level: str = "INFO"


# Create a single instance of the settings to be imported by the entry point
settings = Settings()
