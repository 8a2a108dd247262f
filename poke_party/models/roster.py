"""Roster snapshot dataclasses shared by the cache, query and analysis layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True, slots=True)
class BaseStats:
    """The six base stats of a Pokémon plus their sum."""

    hp: int = 0
    attack: int = 0
    defense: int = 0
    special_attack: int = 0
    special_defense: int = 0
    speed: int = 0

    @property
    def total(self) -> int:
        return (
            self.hp
            + self.attack
            + self.defense
            + self.special_attack
            + self.special_defense
            + self.speed
        )

    def to_payload(self) -> Dict[str, int]:
        return {
            "hp": self.hp,
            "attack": self.attack,
            "defense": self.defense,
            "specialAttack": self.special_attack,
            "specialDefense": self.special_defense,
            "speed": self.speed,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class RosterMember:
    """Compact cached entry for one Pokémon."""

    id: int
    name_en: str
    name: str
    types: Tuple[str, ...]
    sprite: str
    stats: BaseStats
    generation: int

    def matches_search(self, query: str) -> bool:
        needle = query.lower()
        return needle in self.name.lower() or needle in self.name_en.lower()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "nameEn": self.name_en,
            "types": list(self.types),
            "sprite": self.sprite,
            "stats": self.stats.to_payload(),
            "generation": self.generation,
        }


@dataclass(frozen=True, slots=True)
class PokemonDetail:
    """Live detail record: the cached fields plus abilities and size."""

    member: RosterMember
    abilities: Tuple[str, ...] = ()
    height: int = 0
    weight: int = 0

    def to_payload(self) -> Dict[str, Any]:
        payload = self.member.to_payload()
        payload.update(
            {
                "abilities": list(self.abilities),
                "height": self.height,
                "weight": self.weight,
            }
        )
        return payload


@dataclass(frozen=True, slots=True)
class MemberSummary:
    """Display attributes joined onto stored team slots at read time."""

    id: int
    name: str
    name_en: str
    types: Tuple[str, ...] = ()
    sprite: str = ""

    @classmethod
    def placeholder(cls, pokemon_id: int) -> "MemberSummary":
        return cls(
            id=pokemon_id,
            name=f"Pokemon #{pokemon_id}",
            name_en=f"pokemon-{pokemon_id}",
        )

    @classmethod
    def from_member(cls, member: RosterMember) -> "MemberSummary":
        return cls(
            id=member.id,
            name=member.name,
            name_en=member.name_en,
            types=member.types,
            sprite=member.sprite,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "nameEn": self.name_en,
            "types": list(self.types),
            "sprite": self.sprite,
        }


@dataclass(slots=True)
class RosterFilters:
    """Normalised list-query parameters."""

    page: int = 1
    limit: int = 20
    generation: Optional[int] = None
    types: Union[str, Sequence[str], None] = None
    search: Optional[str] = None

    def type_list(self) -> List[str]:
        if self.types is None:
            return []
        raw = self.types.split(",") if isinstance(self.types, str) else list(self.types)
        return [entry.strip().lower() for entry in raw if entry and entry.strip()]

    def search_text(self) -> Optional[str]:
        if self.search is None:
            return None
        text = self.search.strip()
        return text or None


@dataclass(frozen=True, slots=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int

    def to_payload(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass(frozen=True, slots=True)
class RosterPage:
    data: List[RosterMember] = field(default_factory=list)
    pagination: Pagination = field(default_factory=lambda: Pagination(1, 20, 0, 0))

    def to_payload(self) -> Dict[str, Any]:
        return {
            "data": [member.to_payload() for member in self.data],
            "pagination": self.pagination.to_payload(),
        }


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Per-id result of a cache build: either a member or an error message."""

    pokemon_id: int
    member: Optional[RosterMember] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.member is not None
