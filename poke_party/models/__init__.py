"""Shared dataclasses for roster queries and team analysis."""

from .roster import (
    BaseStats,
    FetchOutcome,
    MemberSummary,
    Pagination,
    PokemonDetail,
    RosterFilters,
    RosterMember,
    RosterPage,
)
from .team import SavedTeam, TeamCoverage, TeamSlot, TeamSlotView, TeamView

__all__ = [
    "BaseStats",
    "FetchOutcome",
    "MemberSummary",
    "Pagination",
    "PokemonDetail",
    "RosterFilters",
    "RosterMember",
    "RosterPage",
    "SavedTeam",
    "TeamCoverage",
    "TeamSlot",
    "TeamSlotView",
    "TeamView",
]
