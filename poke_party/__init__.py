"""Pokemon team builder: roster cache, queries and type coverage analysis."""

from .analysis import TeamCoverageAnalyzer, TypeMatrix
from .services.context import PartyContext, build_context, create_context

__all__ = [
    "PartyContext",
    "TeamCoverageAnalyzer",
    "TypeMatrix",
    "build_context",
    "create_context",
]
