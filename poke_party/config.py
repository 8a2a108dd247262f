"""Environment-driven settings for the team builder services."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load default .env first, then overlay .env.local so user-specific values win.
load_dotenv()
load_dotenv(".env.local", override=True)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration shared by the CLI, web and MCP surfaces."""

    pokeapi_base_url: str = "https://pokeapi.co/api/v2"
    pokeapi_timeout: float = 5.0
    pokeapi_cache_ttl: int = 0
    roster_size: Optional[int] = None
    concurrency: int = 50
    language: str = "ja"
    generations_file: Optional[str] = None
    max_teams_per_user: int = 10
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


def load_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""

    defaults = Settings()
    return Settings(
        pokeapi_base_url=os.getenv("POKEAPI_BASE_URL") or defaults.pokeapi_base_url,
        pokeapi_timeout=_env_float("POKEAPI_TIMEOUT", defaults.pokeapi_timeout),
        pokeapi_cache_ttl=_env_int("POKEAPI_CACHE_TTL", defaults.pokeapi_cache_ttl),
        roster_size=_env_int("POKE_PARTY_ROSTER_SIZE", None),
        concurrency=_env_int("POKE_PARTY_CONCURRENCY", defaults.concurrency),
        language=os.getenv("POKE_PARTY_LANGUAGE") or defaults.language,
        generations_file=os.getenv("POKE_PARTY_GENERATIONS_FILE") or None,
        max_teams_per_user=_env_int("POKE_PARTY_MAX_TEAMS", defaults.max_teams_per_user),
        log_level=os.getenv("POKE_PARTY_LOG_LEVEL") or defaults.log_level,
        host=os.getenv("HOST") or defaults.host,
        port=_env_int("PORT", defaults.port),
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a single stderr handler for the ``poke_party`` loggers."""

    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
