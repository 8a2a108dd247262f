"""Roster caching, querying and saved-team services."""

from .roster_cache import RosterCache, RosterCacheBuilder
from .roster_query import RosterQueryEngine
from .team_service import (
    InMemoryTeamStore,
    TeamAccessDeniedError,
    TeamNotFoundError,
    TeamService,
    TeamServiceError,
    TeamStore,
    TeamValidationError,
)

__all__ = [
    "InMemoryTeamStore",
    "RosterCache",
    "RosterCacheBuilder",
    "RosterQueryEngine",
    "TeamAccessDeniedError",
    "TeamNotFoundError",
    "TeamService",
    "TeamServiceError",
    "TeamStore",
    "TeamValidationError",
]
