"""Generation -> Pokédex id range table, loaded from versioned JSON data."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

DEFAULT_GENERATIONS_FILE = Path(__file__).resolve().parent / "generations.json"


@dataclass(frozen=True)
class GenerationTable:
    """Inclusive id ranges per generation number."""

    ranges: Mapping[int, Tuple[int, int]] = field(default_factory=dict)
    version: str = "unversioned"
    roster_size: int = 0

    def range_for(self, generation: int) -> Optional[Tuple[int, int]]:
        return self.ranges.get(generation)

    def contains(self, generation: int, pokemon_id: int) -> bool:
        bounds = self.range_for(generation)
        if bounds is None:
            return False
        return bounds[0] <= pokemon_id <= bounds[1]

    def generation_of(self, pokemon_id: int) -> int:
        for generation, (low, high) in self.ranges.items():
            if low <= pokemon_id <= high:
                return generation
        return 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GenerationTable":
        ranges: Dict[int, Tuple[int, int]] = {}
        for key, bounds in (payload.get("ranges") or {}).items():
            low, high = int(bounds[0]), int(bounds[1])
            if low > high:
                raise ValueError(f"Generation {key} range is inverted: {low} > {high}")
            ranges[int(key)] = (low, high)
        roster_size = int(payload.get("roster_size") or max((high for _, high in ranges.values()), default=0))
        return cls(
            ranges=dict(sorted(ranges.items())),
            version=str(payload.get("version") or "unversioned"),
            roster_size=roster_size,
        )


def load_generation_table(path: str | Path | None = None) -> GenerationTable:
    """Load the generation table from ``path`` or the bundled default file."""

    file_path = Path(path) if path else DEFAULT_GENERATIONS_FILE
    with file_path.open(encoding="utf-8") as handle:
        payload = json.load(handle)
    return GenerationTable.from_dict(payload)
