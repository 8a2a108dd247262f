"""Team composition, storage and coverage dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .roster import MemberSummary


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class TeamSlot:
    """A stored party slot: only the Pokémon id and its position (0-5)."""

    pokemon_id: int
    position: int


@dataclass(slots=True)
class SavedTeam:
    """Team record as persisted by a ``TeamStore``."""

    id: str
    user_id: str
    name: str
    is_public: bool = False
    share_id: Optional[str] = None
    slots: List[TeamSlot] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def ordered_slots(self) -> List[TeamSlot]:
        return sorted(self.slots, key=lambda slot: slot.position)


@dataclass(frozen=True, slots=True)
class TeamSlotView:
    """Stored slot joined with the current roster display data."""

    pokemon_id: int
    position: int
    pokemon: MemberSummary

    def to_payload(self) -> Dict[str, Any]:
        return {
            "pokemonId": self.pokemon_id,
            "position": self.position,
            "pokemon": self.pokemon.to_payload(),
        }


@dataclass(frozen=True, slots=True)
class TeamView:
    """Read model returned by the team service."""

    id: str
    user_id: str
    name: str
    is_public: bool
    share_id: Optional[str]
    slots: List[TeamSlotView]
    created_at: datetime
    updated_at: datetime

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "isPublic": self.is_public,
            "shareId": self.share_id,
            "pokemon": [slot.to_payload() for slot in self.slots],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TeamCoverage:
    """Worst-case incoming multiplier per attacking type plus tallies."""

    defensive: Dict[str, float]
    weakness_count: int
    resistance_count: int
    immunity_count: int

    def weaknesses(self) -> List[str]:
        return [name for name, value in self.defensive.items() if value >= 2]

    def resistances(self) -> List[str]:
        return [name for name, value in self.defensive.items() if 0 < value <= 0.5]

    def immunities(self) -> List[str]:
        return [name for name, value in self.defensive.items() if value == 0]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "defensive": dict(self.defensive),
            "weaknessCount": self.weakness_count,
            "resistanceCount": self.resistance_count,
            "immunityCount": self.immunity_count,
        }
