"""Pure helpers that normalise raw PokéAPI payloads into roster records."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models import BaseStats, PokemonDetail, RosterMember

GENERATION_PATTERN = re.compile(r"^generation-([0-9]+|[ivx]+)$", re.IGNORECASE)

ROMAN_VALUES = {"i": 1, "v": 5, "x": 10}

STAT_FIELDS = {
    "hp": "hp",
    "attack": "attack",
    "defense": "defense",
    "special-attack": "special_attack",
    "special-defense": "special_defense",
    "speed": "speed",
}


def extract_types(payload: Mapping[str, Any]) -> Tuple[str, ...]:
    """Return type names ordered by slot (primary first)."""

    slots = sorted(payload.get("types") or [], key=lambda entry: entry.get("slot", 0))
    names: List[str] = []
    for slot in slots:
        name = (slot.get("type") or {}).get("name")
        if name and name not in names:
            names.append(name)
    return tuple(names)


def extract_stats(raw_stats: Iterable[Mapping[str, Any]]) -> BaseStats:
    """Pick the six base stats by name; anything missing counts as 0."""

    values: Dict[str, int] = {}
    for entry in raw_stats or []:
        stat_name = (entry.get("stat") or {}).get("name")
        field_name = STAT_FIELDS.get(stat_name or "")
        if field_name and field_name not in values:
            values[field_name] = int(entry.get("base_stat") or 0)
    return BaseStats(**values)


def extract_generation(label: Optional[str]) -> int:
    """Parse ``generation-<N>`` labels (arabic or roman numerals); 0 if unknown."""

    if not label:
        return 0
    match = GENERATION_PATTERN.match(label.strip())
    if not match:
        return 0
    token = match.group(1).lower()
    if token.isdigit():
        return int(token)
    return _roman_to_int(token)


def localized_name(
    names: Iterable[Mapping[str, Any]], fallback: str, language: str = "ja"
) -> str:
    for entry in names or []:
        if (entry.get("language") or {}).get("name") == language and entry.get("name"):
            return entry["name"]
    return fallback


def extract_sprite(payload: Mapping[str, Any]) -> str:
    return (payload.get("sprites") or {}).get("front_default") or ""


def extract_abilities(payload: Mapping[str, Any]) -> Tuple[str, ...]:
    abilities = sorted(payload.get("abilities") or [], key=lambda entry: entry.get("slot", 0))
    return tuple(
        entry["ability"]["name"] for entry in abilities if (entry.get("ability") or {}).get("name")
    )


def build_member(
    pokemon: Mapping[str, Any],
    species: Mapping[str, Any],
    *,
    language: str = "ja",
    generation_hint: int = 0,
) -> RosterMember:
    """Combine a ``/pokemon`` and ``/pokemon-species`` payload into a cache entry.

    ``generation_hint`` is used when the species generation label cannot be
    parsed (typically a lookup in the generation range table).
    """

    name_en = pokemon.get("name")
    if not isinstance(name_en, str) or not name_en:
        raise ValueError(f"pokemon payload {pokemon.get('id')!r} has no name")
    generation = extract_generation((species.get("generation") or {}).get("name"))
    return RosterMember(
        id=int(pokemon["id"]),
        name_en=name_en,
        name=localized_name(species.get("names") or [], name_en, language),
        types=extract_types(pokemon),
        sprite=extract_sprite(pokemon),
        stats=extract_stats(pokemon.get("stats") or []),
        generation=generation or generation_hint,
    )


def build_detail(
    pokemon: Mapping[str, Any],
    species: Mapping[str, Any],
    *,
    language: str = "ja",
    generation_hint: int = 0,
) -> PokemonDetail:
    member = build_member(
        pokemon, species, language=language, generation_hint=generation_hint
    )
    return PokemonDetail(
        member=member,
        abilities=extract_abilities(pokemon),
        height=int(pokemon.get("height") or 0),
        weight=int(pokemon.get("weight") or 0),
    )


def _roman_to_int(token: str) -> int:
    total = 0
    previous = 0
    for char in reversed(token):
        value = ROMAN_VALUES[char]
        if value < previous:
            total -= value
        else:
            total += value
            previous = value
    return total
