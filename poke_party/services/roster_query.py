"""Paginated, filtered reads over the roster cache plus live detail lookups."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Iterable, List, Optional

from ..clients import PokeAPIClient
from ..data import GenerationTable
from ..models import (
    MemberSummary,
    Pagination,
    PokemonDetail,
    RosterFilters,
    RosterMember,
    RosterPage,
)
from ..parsers import build_detail
from .roster_cache import RosterCache

logger = logging.getLogger(__name__)


class RosterQueryEngine:
    """Read-only query surface over a ``RosterCache``."""

    def __init__(
        self,
        cache: RosterCache,
        client: PokeAPIClient,
        generations: GenerationTable,
        *,
        language: str = "ja",
    ) -> None:
        self.cache = cache
        self.client = client
        self.generations = generations
        self.language = language

    def get_by_id(self, pokemon_id: int) -> Optional[RosterMember]:
        return self.cache.get(pokemon_id)

    def get_list(self, filters: Optional[RosterFilters] = None) -> RosterPage:
        filters = filters or RosterFilters()
        if filters.page < 1:
            raise ValueError("page must be >= 1")
        if filters.limit < 1:
            raise ValueError("limit must be > 0")

        filtered: List[RosterMember] = list(self.cache.snapshot())

        if filters.generation is not None:
            bounds = self.generations.range_for(filters.generation)
            if bounds is None:
                filtered = []
            else:
                low, high = bounds
                filtered = [member for member in filtered if low <= member.id <= high]

        wanted_types = filters.type_list()
        if wanted_types:
            filtered = [
                member
                for member in filtered
                if all(type_name in member.types for type_name in wanted_types)
            ]

        query = filters.search_text()
        if query:
            filtered = [member for member in filtered if member.matches_search(query)]

        total = len(filtered)
        total_pages = math.ceil(total / filters.limit)
        start = (filters.page - 1) * filters.limit
        return RosterPage(
            data=filtered[start : start + filters.limit],
            pagination=Pagination(
                page=filters.page,
                limit=filters.limit,
                total=total,
                total_pages=total_pages,
            ),
        )

    async def get_detail(self, pokemon_id: int) -> Optional[PokemonDetail]:
        """Fetch a detail record live from PokéAPI; ``None`` on any failure."""

        try:
            pokemon, species = await asyncio.gather(
                asyncio.to_thread(self.client.get_pokemon, pokemon_id, fresh=True),
                asyncio.to_thread(self.client.get_pokemon_species, pokemon_id, fresh=True),
            )
            return build_detail(
                pokemon,
                species,
                language=self.language,
                generation_hint=self.generations.generation_of(pokemon_id),
            )
        except Exception as exc:
            logger.warning("Failed to fetch pokemon detail for id %d: %s", pokemon_id, exc)
            return None

    def enrich_members(self, pokemon_ids: Iterable[int]) -> List[MemberSummary]:
        summaries: List[MemberSummary] = []
        for pokemon_id in pokemon_ids:
            member = self.cache.get(pokemon_id)
            if member is None:
                summaries.append(MemberSummary.placeholder(pokemon_id))
            else:
                summaries.append(MemberSummary.from_member(member))
        return summaries
