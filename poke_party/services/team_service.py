"""Saved-team management on top of a generic store and the live roster cache."""

from __future__ import annotations

import secrets
import string
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Sequence

from ..models import SavedTeam, TeamSlot, TeamSlotView, TeamView
from .roster_query import RosterQueryEngine

MAX_TEAM_SLOTS = 6
MAX_NAME_LENGTH = 100
SHARE_ID_LENGTH = 10
SHARE_ID_ALPHABET = string.ascii_letters + string.digits + "_-"


class TeamServiceError(Exception):
    """Base class for team management failures."""


class TeamNotFoundError(TeamServiceError):
    pass


class TeamAccessDeniedError(TeamServiceError):
    pass


class TeamValidationError(TeamServiceError):
    pass


class TeamStore(Protocol):
    """Minimal CRUD contract for wherever saved teams live."""

    def add(self, team: SavedTeam) -> SavedTeam: ...

    def get(self, team_id: str) -> Optional[SavedTeam]: ...

    def get_by_share_id(self, share_id: str) -> Optional[SavedTeam]: ...

    def list_by_user(self, user_id: str) -> List[SavedTeam]: ...

    def count_by_user(self, user_id: str) -> int: ...

    def save(self, team: SavedTeam) -> SavedTeam: ...

    def delete(self, team_id: str) -> None: ...


class InMemoryTeamStore:
    """Process-local ``TeamStore`` used by default and in tests."""

    def __init__(self) -> None:
        self._teams: Dict[str, SavedTeam] = {}

    def add(self, team: SavedTeam) -> SavedTeam:
        self._teams[team.id] = team
        return team

    def get(self, team_id: str) -> Optional[SavedTeam]:
        return self._teams.get(team_id)

    def get_by_share_id(self, share_id: str) -> Optional[SavedTeam]:
        for team in self._teams.values():
            if team.share_id == share_id:
                return team
        return None

    def list_by_user(self, user_id: str) -> List[SavedTeam]:
        return [team for team in self._teams.values() if team.user_id == user_id]

    def count_by_user(self, user_id: str) -> int:
        return len(self.list_by_user(user_id))

    def save(self, team: SavedTeam) -> SavedTeam:
        self._teams[team.id] = team
        return team

    def delete(self, team_id: str) -> None:
        self._teams.pop(team_id, None)


class TeamService:
    """Create, read, update and delete saved teams.

    Stored teams keep only ``(pokemon_id, position)`` pairs. Names, types and
    sprites are joined from the roster cache every time a team is read.
    """

    def __init__(
        self,
        store: TeamStore,
        query_engine: RosterQueryEngine,
        *,
        max_teams_per_user: int = 10,
    ) -> None:
        self.store = store
        self.query_engine = query_engine
        self.max_teams_per_user = max_teams_per_user

    def create(
        self,
        user_id: str,
        name: str,
        slots: Sequence[TeamSlot],
        *,
        is_public: bool = False,
    ) -> TeamView:
        if self.store.count_by_user(user_id) >= self.max_teams_per_user:
            raise TeamValidationError(
                f"Maximum {self.max_teams_per_user} teams per user allowed"
            )
        self._validate_name(name)
        self._validate_slots(slots)
        team = SavedTeam(
            id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            is_public=is_public,
            share_id=_new_share_id() if is_public else None,
            slots=list(slots),
        )
        return self._view(self.store.add(team))

    def list_for_user(self, user_id: str) -> List[TeamView]:
        teams = sorted(
            self.store.list_by_user(user_id),
            key=lambda team: team.updated_at,
            reverse=True,
        )
        return [self._view(team) for team in teams]

    def get(self, team_id: str, user_id: Optional[str] = None) -> TeamView:
        team = self._require(team_id)
        if user_id is not None and team.user_id != user_id and not team.is_public:
            raise TeamAccessDeniedError("Access denied")
        return self._view(team)

    def get_shared(self, share_id: str) -> TeamView:
        team = self.store.get_by_share_id(share_id)
        if team is None:
            raise TeamNotFoundError("Team not found")
        if not team.is_public:
            raise TeamAccessDeniedError("This team is not public")
        return self._view(team)

    def update(
        self,
        team_id: str,
        user_id: str,
        *,
        name: Optional[str] = None,
        is_public: Optional[bool] = None,
        slots: Optional[Sequence[TeamSlot]] = None,
    ) -> TeamView:
        team = self._require_owned(team_id, user_id)
        if name is not None:
            self._validate_name(name)
        if slots is not None:
            self._validate_slots(slots)

        share_id = team.share_id
        if is_public is not None:
            if is_public and not team.share_id:
                share_id = _new_share_id()
            elif not is_public:
                share_id = None

        updated = replace(
            team,
            name=team.name if name is None else name,
            is_public=team.is_public if is_public is None else is_public,
            share_id=share_id,
            slots=team.slots if slots is None else list(slots),
            updated_at=datetime.now(timezone.utc),
        )
        return self._view(self.store.save(updated))

    def delete(self, team_id: str, user_id: str) -> None:
        self._require_owned(team_id, user_id)
        self.store.delete(team_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require(self, team_id: str) -> SavedTeam:
        team = self.store.get(team_id)
        if team is None:
            raise TeamNotFoundError("Team not found")
        return team

    def _require_owned(self, team_id: str, user_id: str) -> SavedTeam:
        team = self._require(team_id)
        if team.user_id != user_id:
            raise TeamAccessDeniedError("Access denied")
        return team

    def _view(self, team: SavedTeam) -> TeamView:
        ordered = team.ordered_slots()
        summaries = self.query_engine.enrich_members(slot.pokemon_id for slot in ordered)
        return TeamView(
            id=team.id,
            user_id=team.user_id,
            name=team.name,
            is_public=team.is_public,
            share_id=team.share_id,
            slots=[
                TeamSlotView(pokemon_id=slot.pokemon_id, position=slot.position, pokemon=summary)
                for slot, summary in zip(ordered, summaries)
            ],
            created_at=team.created_at,
            updated_at=team.updated_at,
        )

    @staticmethod
    def _validate_name(name: str) -> None:
        if not name or not name.strip():
            raise TeamValidationError("Team name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise TeamValidationError(f"Team name must be at most {MAX_NAME_LENGTH} characters")

    @staticmethod
    def _validate_slots(slots: Sequence[TeamSlot]) -> None:
        if len(slots) > MAX_TEAM_SLOTS:
            raise TeamValidationError(f"A team holds at most {MAX_TEAM_SLOTS} Pokémon")
        positions = [slot.position for slot in slots]
        if len(positions) != len(set(positions)):
            raise TeamValidationError("Duplicate positions are not allowed")
        for slot in slots:
            if not 0 <= slot.position < MAX_TEAM_SLOTS:
                raise TeamValidationError(f"Position {slot.position} is out of range (0-5)")
            if slot.pokemon_id < 1:
                raise TeamValidationError(f"Invalid pokemon id {slot.pokemon_id}")


def _new_share_id() -> str:
    return "".join(secrets.choice(SHARE_ID_ALPHABET) for _ in range(SHARE_ID_LENGTH))
