"""Composition root wiring the client, caches and services together."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from ..analysis import TeamCoverageAnalyzer, TypeMatrixBuilder, TypeMatrixHolder
from ..clients import PokeAPIClient
from ..config import Settings, load_settings
from ..data import GenerationTable, load_generation_table
from .roster_cache import RosterCache, RosterCacheBuilder
from .roster_query import RosterQueryEngine
from .team_service import InMemoryTeamStore, TeamService, TeamStore

logger = logging.getLogger(__name__)


@dataclass
class PartyContext:
    """Owns every long-lived object the HTTP, MCP and CLI surfaces need."""

    settings: Settings
    client: PokeAPIClient
    generations: GenerationTable
    roster: RosterCache
    matrix: TypeMatrixHolder
    roster_builder: RosterCacheBuilder
    matrix_builder: TypeMatrixBuilder
    query: RosterQueryEngine
    analyzer: TeamCoverageAnalyzer
    teams: TeamService
    _build_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def is_ready(self) -> bool:
        return self.roster.is_ready and self.matrix.is_ready

    async def build(self) -> "PartyContext":
        """Build the type matrix and roster cache concurrently.

        A matrix failure propagates and leaves the previous matrix (if any) in
        place; roster fetch failures only shrink the roster.
        """

        await asyncio.gather(
            self.matrix.rebuild(self.matrix_builder),
            self.roster_builder.rebuild(self.roster),
        )
        logger.info(
            "Context ready: %d pokemon cached (generation table %s)",
            len(self.roster),
            self.generations.version,
        )
        return self

    async def ensure_ready(self) -> "PartyContext":
        async with self._build_lock:
            if not self.is_ready:
                await self.build()
        return self


def create_context(
    settings: Optional[Settings] = None,
    *,
    client: Optional[PokeAPIClient] = None,
    store: Optional[TeamStore] = None,
    generations: Optional[GenerationTable] = None,
) -> PartyContext:
    """Wire all components without touching the network."""

    settings = settings or load_settings()
    client = client or PokeAPIClient(
        base_url=settings.pokeapi_base_url,
        cache_ttl=settings.pokeapi_cache_ttl,
        timeout=settings.pokeapi_timeout,
    )
    generations = generations or load_generation_table(settings.generations_file)
    roster_size = settings.roster_size if settings.roster_size is not None else generations.roster_size

    roster = RosterCache()
    matrix = TypeMatrixHolder()
    query = RosterQueryEngine(roster, client, generations, language=settings.language)
    return PartyContext(
        settings=settings,
        client=client,
        generations=generations,
        roster=roster,
        matrix=matrix,
        roster_builder=RosterCacheBuilder(
            client,
            roster_size=roster_size,
            concurrency=settings.concurrency,
            language=settings.language,
            generations=generations,
        ),
        matrix_builder=TypeMatrixBuilder(client),
        query=query,
        analyzer=TeamCoverageAnalyzer(roster, matrix),
        teams=TeamService(
            store or InMemoryTeamStore(),
            query,
            max_teams_per_user=settings.max_teams_per_user,
        ),
    )


async def build_context(
    settings: Optional[Settings] = None,
    *,
    client: Optional[PokeAPIClient] = None,
    store: Optional[TeamStore] = None,
) -> PartyContext:
    context = create_context(settings, client=client, store=store)
    return await context.build()
