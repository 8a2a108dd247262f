"""Lightweight wrapper around PokéAPI for fetching roster and type data."""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, Optional, Union

import requests

logger = logging.getLogger(__name__)


class PokeAPIClientError(RuntimeError):
    """Raised when the PokeAPI request fails."""


class PokeAPINotFound(PokeAPIClientError):
    """Raised when PokeAPI answers 404 for the requested resource."""


class PokeAPIClient:
    """Small helper client with optional in-memory response caching."""

    BASE_URL = "https://pokeapi.co/api/v2"

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        cache_ttl: int = 0,
        timeout: float = 5.0,
        user_agent: str = "poke-party/0.1 (+https://github.com/)",
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self.user_agent = user_agent
        self._cache: Dict[str, tuple[float, Any]] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_pokemon(self, pokemon: Union[int, str], *, fresh: bool = False) -> Dict[str, Any]:
        return self._get_json(f"pokemon/{self._slugify_key(pokemon)}", fresh=fresh)

    def get_pokemon_species(
        self, pokemon: Union[int, str], *, fresh: bool = False
    ) -> Dict[str, Any]:
        return self._get_json(f"pokemon-species/{self._slugify_key(pokemon)}", fresh=fresh)

    def get_type(self, type_name: str) -> Dict[str, Any]:
        slug = self._slugify_type(type_name)
        return self._get_json(f"type/{slug}")

    def get_type_damage_relations(self, type_name: str) -> Dict[str, Any]:
        payload = self.get_type(type_name)
        return payload.get("damage_relations") or {}

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_json(self, endpoint: str, *, fresh: bool = False) -> Dict[str, Any]:
        url = self._build_url(endpoint)
        now = time.time()
        if not fresh:
            cached = self._cache.get(url)
            if cached and now - cached[0] < self.cache_ttl:
                return cached[1]

        logger.debug("GET %s", url)
        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
        except requests.RequestException as exc:
            raise PokeAPIClientError(f"{url}: {exc}") from exc

        if response.status_code == 404:
            raise PokeAPINotFound(f"{url}: not found")
        try:
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise PokeAPIClientError(f"{url}: {exc}") from exc
        except ValueError as exc:
            raise PokeAPIClientError(f"{url}: invalid JSON body") from exc

        if self.cache_ttl > 0:
            self._cache[url] = (now, payload)
        return payload

    def _build_url(self, endpoint: str) -> str:
        endpoint = endpoint.lstrip("/")
        return f"{self.base_url}/{endpoint}"

    @staticmethod
    def _slugify_key(pokemon: Union[int, str]) -> str:
        if isinstance(pokemon, int):
            return str(pokemon)
        return PokeAPIClient._slugify_name(pokemon)

    @staticmethod
    def _slugify_name(name: str) -> str:
        slug = name.strip().lower()
        slug = re.sub(r"[\s\.]+", "-", slug)
        slug = slug.replace("'", "")
        slug = slug.replace(":", "")
        slug = slug.replace("%", "")
        slug = re.sub(r"[^a-z0-9\-]", "", slug)
        return slug

    @staticmethod
    def _slugify_type(type_name: str) -> str:
        slug = type_name.strip().lower().replace(" ", "-")
        return slug
