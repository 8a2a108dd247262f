"""Attacker -> defender damage multiplier matrix built from PokéAPI type data."""

from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from ..clients import PokeAPIClient

logger = logging.getLogger(__name__)

ALL_TYPES = (
    "normal",
    "fire",
    "water",
    "electric",
    "grass",
    "ice",
    "fighting",
    "poison",
    "ground",
    "flying",
    "psychic",
    "bug",
    "rock",
    "ghost",
    "dragon",
    "dark",
    "steel",
    "fairy",
)

# Applied in order, so a later relation wins if PokéAPI lists a type twice.
RELATION_MULTIPLIERS = (
    ("double_damage_to", 2.0),
    ("half_damage_to", 0.5),
    ("no_damage_to", 0.0),
)


class TypeMatrixBuildError(RuntimeError):
    """Raised when any of the 18 type lookups fails during a matrix build."""

    def __init__(self, type_name: str, reason: str) -> None:
        super().__init__(f"Failed to fetch type {type_name}: {reason}")
        self.type_name = type_name


class TypeMatrixUnavailable(RuntimeError):
    """Raised when analysis is requested before a matrix was built."""


class TypeMatrix:
    """Immutable, fully populated 18x18 multiplier table."""

    def __init__(self, rows: Mapping[str, Mapping[str, float]]) -> None:
        frozen: Dict[str, Mapping[str, float]] = {}
        for attacker in ALL_TYPES:
            row = rows.get(attacker)
            if row is None:
                raise ValueError(f"Missing matrix row for {attacker}")
            missing = [defender for defender in ALL_TYPES if defender not in row]
            if missing:
                raise ValueError(f"Row {attacker} is missing {', '.join(missing)}")
            frozen[attacker] = MappingProxyType(
                {defender: float(row[defender]) for defender in ALL_TYPES}
            )
        self._rows = MappingProxyType(frozen)

    @classmethod
    def from_relations(cls, relations: Mapping[str, Mapping[str, Any]]) -> "TypeMatrix":
        """Build from ``{attacker: damage_relations}`` as returned by PokéAPI."""

        rows: Dict[str, Dict[str, float]] = {}
        for attacker in ALL_TYPES:
            row = {defender: 1.0 for defender in ALL_TYPES}
            damage_relations = relations.get(attacker) or {}
            for key, multiplier in RELATION_MULTIPLIERS:
                for target in damage_relations.get(key) or []:
                    name = target.get("name") if isinstance(target, Mapping) else target
                    if name in row:
                        row[name] = multiplier
            rows[attacker] = row
        return cls(rows)

    def multiplier(self, attacker: str, defender: str) -> float:
        return self._rows[attacker][defender]

    def defense_multiplier(self, attacker: str, defender_types: Iterable[str]) -> float:
        """Incoming multiplier for a Pokémon; dual types multiply together."""

        row = self._rows[attacker]
        multiplier = 1.0
        for defender in defender_types:
            multiplier *= row.get(defender, 1.0)
        return multiplier

    def row(self, attacker: str) -> Mapping[str, float]:
        return self._rows[attacker]

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {attacker: dict(row) for attacker, row in self._rows.items()}


class TypeMatrixBuilder:
    def __init__(self, client: PokeAPIClient) -> None:
        self.client = client

    async def build(self) -> TypeMatrix:
        logger.info("Building type effectiveness matrix...")
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self.client.get_type_damage_relations, type_name)
                for type_name in ALL_TYPES
            ),
            return_exceptions=True,
        )
        relations: Dict[str, Mapping[str, Any]] = {}
        for type_name, result in zip(ALL_TYPES, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.error("Type matrix build failed on %s: %s", type_name, result)
                raise TypeMatrixBuildError(type_name, str(result)) from result
            relations[type_name] = result
        matrix = TypeMatrix.from_relations(relations)
        logger.info("Type effectiveness matrix built")
        return matrix


class TypeMatrixHolder:
    """Owned reference to the current matrix; swapped wholesale on rebuild."""

    def __init__(self, matrix: Optional[TypeMatrix] = None) -> None:
        self._matrix = matrix

    @property
    def is_ready(self) -> bool:
        return self._matrix is not None

    def replace(self, matrix: TypeMatrix) -> None:
        self._matrix = matrix

    def get(self) -> TypeMatrix:
        matrix = self._matrix
        if matrix is None:
            raise TypeMatrixUnavailable("Type effectiveness matrix has not been built")
        return matrix

    async def rebuild(self, builder: TypeMatrixBuilder) -> TypeMatrix:
        matrix = await builder.build()
        self.replace(matrix)
        return matrix
