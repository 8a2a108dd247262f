"""Startup batch fetch of the full roster into an in-memory snapshot."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..clients import PokeAPIClient
from ..data import GenerationTable
from ..models import FetchOutcome, RosterMember
from ..parsers import build_member

logger = logging.getLogger(__name__)


class RosterCache:
    """Holds the current roster snapshot.

    The snapshot is a tuple plus an id index; ``replace`` swaps in a new pair
    with one assignment so readers never observe a half-built roster.
    """

    def __init__(self, members: Sequence[RosterMember] = ()) -> None:
        self._state: Optional[Tuple[Tuple[RosterMember, ...], Dict[int, RosterMember]]] = None
        if members:
            self.replace(members)

    @property
    def is_ready(self) -> bool:
        return self._state is not None

    def replace(self, members: Sequence[RosterMember]) -> None:
        snapshot = tuple(members)
        index = {member.id: member for member in snapshot}
        self._state = (snapshot, index)

    def snapshot(self) -> Tuple[RosterMember, ...]:
        state = self._state
        return state[0] if state else ()

    def get(self, pokemon_id: int) -> Optional[RosterMember]:
        state = self._state
        if state is None:
            return None
        return state[1].get(pokemon_id)

    def __len__(self) -> int:
        return len(self.snapshot())

    def __iter__(self) -> Iterator[RosterMember]:
        return iter(self.snapshot())

    def __contains__(self, pokemon_id: object) -> bool:
        state = self._state
        return bool(state) and pokemon_id in state[1]


class RosterCacheBuilder:
    """Fetches every Pokémon plus its species record and normalises them."""

    def __init__(
        self,
        client: PokeAPIClient,
        *,
        roster_size: int = 1025,
        concurrency: int = 50,
        language: str = "ja",
        generations: Optional[GenerationTable] = None,
    ) -> None:
        if roster_size < 0:
            raise ValueError("roster_size must be >= 0")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.client = client
        self.roster_size = roster_size
        self.concurrency = concurrency
        self.language = language
        self.generations = generations

    async def build(self) -> List[RosterMember]:
        """Return cached members in ascending id order, skipping failed ids."""

        logger.info(
            "Building pokemon cache (%d ids, %d concurrent)",
            self.roster_size,
            self.concurrency,
        )
        semaphore = asyncio.Semaphore(self.concurrency)
        progress = {"done": 0, "cached": 0}
        ids = range(1, self.roster_size + 1)

        async def _bounded(pokemon_id: int) -> FetchOutcome:
            async with semaphore:
                outcome = await self.fetch_one(pokemon_id)
            progress["done"] += 1
            if outcome.ok:
                progress["cached"] += 1
            if progress["done"] % self.concurrency == 0:
                logger.info(
                    "Cached %d/%d pokemon...", progress["cached"], self.roster_size
                )
            return outcome

        # gather keeps input order, so the result is id-ordered whatever finishes first
        outcomes = await asyncio.gather(*(_bounded(pokemon_id) for pokemon_id in ids))
        members = self.collect(outcomes)
        logger.info("Pokemon cache built: %d entries", len(members))
        return members

    async def rebuild(self, cache: RosterCache) -> RosterCache:
        members = await self.build()
        cache.replace(members)
        return cache

    async def fetch_one(self, pokemon_id: int) -> FetchOutcome:
        """Fetch and normalise a single id; any failure becomes an error outcome."""

        try:
            pokemon, species = await asyncio.gather(
                asyncio.to_thread(self.client.get_pokemon, pokemon_id),
                asyncio.to_thread(self.client.get_pokemon_species, pokemon_id),
            )
            hint = self.generations.generation_of(pokemon_id) if self.generations else 0
            member = build_member(
                pokemon, species, language=self.language, generation_hint=hint
            )
        except Exception as exc:
            return FetchOutcome(pokemon_id=pokemon_id, error=str(exc) or type(exc).__name__)
        return FetchOutcome(pokemon_id=pokemon_id, member=member)

    @staticmethod
    def collect(outcomes: Sequence[FetchOutcome]) -> List[RosterMember]:
        members: List[RosterMember] = []
        for outcome in outcomes:
            if outcome.member is None:
                logger.warning(
                    "Failed to fetch pokemon #%d, skipping: %s",
                    outcome.pokemon_id,
                    outcome.error,
                )
                continue
            members.append(outcome.member)
        return members
