"""Defensive type coverage for a party, using worst-member semantics."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..models import TeamCoverage
from ..services.roster_cache import RosterCache
from .type_matrix import ALL_TYPES, TypeMatrix, TypeMatrixHolder

MAX_TEAM_SIZE = 6


class PokemonNotFoundError(LookupError):
    """Raised when a requested team member is absent from the roster cache."""

    def __init__(self, pokemon_id: int) -> None:
        super().__init__(f"Pokemon with ID {pokemon_id} not found")
        self.pokemon_id = pokemon_id


class TeamCoverageAnalyzer:
    """Computes, per attacking type, the team's highest incoming multiplier.

    The analyzer only reads from the roster cache and the matrix holder, so
    one instance can serve any number of concurrent requests.
    """

    def __init__(self, cache: RosterCache, matrix: TypeMatrixHolder) -> None:
        self.cache = cache
        self.matrix = matrix

    def analyze(self, member_ids: Sequence[int]) -> TeamCoverage:
        if not 1 <= len(member_ids) <= MAX_TEAM_SIZE:
            raise ValueError(f"A team needs between 1 and {MAX_TEAM_SIZE} Pokémon")

        team_types = self._resolve_types(member_ids)
        matrix = self.matrix.get()
        defensive = {
            attacker: self._worst_multiplier(matrix, attacker, team_types)
            for attacker in ALL_TYPES
        }
        return summarize(defensive)

    def _resolve_types(self, member_ids: Sequence[int]) -> List[Tuple[str, ...]]:
        team_types: List[Tuple[str, ...]] = []
        for pokemon_id in member_ids:
            member = self.cache.get(pokemon_id)
            if member is None:
                raise PokemonNotFoundError(pokemon_id)
            team_types.append(member.types)
        return team_types

    @staticmethod
    def _worst_multiplier(
        matrix: TypeMatrix, attacker: str, team_types: Sequence[Tuple[str, ...]]
    ) -> float:
        return max(matrix.defense_multiplier(attacker, types) for types in team_types)


def summarize(defensive: Dict[str, float]) -> TeamCoverage:
    values = list(defensive.values())
    return TeamCoverage(
        defensive=defensive,
        weakness_count=sum(1 for value in values if value >= 2),
        resistance_count=sum(1 for value in values if 0 < value <= 0.5),
        immunity_count=sum(1 for value in values if value == 0),
    )
