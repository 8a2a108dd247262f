"""Type effectiveness analysis for roster teams."""

from .team_coverage import PokemonNotFoundError, TeamCoverageAnalyzer
from .type_matrix import (
    ALL_TYPES,
    TypeMatrix,
    TypeMatrixBuildError,
    TypeMatrixBuilder,
    TypeMatrixHolder,
    TypeMatrixUnavailable,
)

__all__ = [
    "ALL_TYPES",
    "PokemonNotFoundError",
    "TeamCoverageAnalyzer",
    "TypeMatrix",
    "TypeMatrixBuildError",
    "TypeMatrixBuilder",
    "TypeMatrixHolder",
    "TypeMatrixUnavailable",
]
