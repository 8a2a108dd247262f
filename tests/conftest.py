"""Shared fakes for the roster, matrix and web tests (no network access)."""

from __future__ import annotations

import threading
import time
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pytest

from poke_party.analysis import TypeMatrix, TypeMatrixHolder
from poke_party.clients import PokeAPIClientError, PokeAPINotFound
from poke_party.config import Settings
from poke_party.data import load_generation_table
from poke_party.models import BaseStats, RosterMember
from poke_party.services import RosterCache
from poke_party.services.context import create_context

TYPE_CHART: Dict[str, Dict[str, tuple[str, ...]]] = {
    "normal": {"double": (), "half": ("rock", "steel"), "zero": ("ghost",)},
    "fire": {"double": ("grass", "ice", "bug", "steel"), "half": ("fire", "water", "rock", "dragon"), "zero": ()},
    "water": {"double": ("fire", "ground", "rock"), "half": ("water", "grass", "dragon"), "zero": ()},
    "electric": {"double": ("water", "flying"), "half": ("electric", "grass", "dragon"), "zero": ("ground",)},
    "grass": {
        "double": ("water", "ground", "rock"),
        "half": ("fire", "grass", "poison", "flying", "bug", "dragon", "steel"),
        "zero": (),
    },
    "ice": {"double": ("grass", "ground", "flying", "dragon"), "half": ("fire", "water", "ice", "steel"), "zero": ()},
    "fighting": {
        "double": ("normal", "ice", "rock", "dark", "steel"),
        "half": ("poison", "flying", "psychic", "bug", "fairy"),
        "zero": ("ghost",),
    },
    "poison": {"double": ("grass", "fairy"), "half": ("poison", "ground", "rock", "ghost"), "zero": ("steel",)},
    "ground": {"double": ("fire", "electric", "poison", "rock", "steel"), "half": ("grass", "bug"), "zero": ("flying",)},
    "flying": {"double": ("grass", "fighting", "bug"), "half": ("electric", "rock", "steel"), "zero": ()},
    "psychic": {"double": ("fighting", "poison"), "half": ("psychic", "steel"), "zero": ("dark",)},
    "bug": {
        "double": ("grass", "psychic", "dark"),
        "half": ("fire", "fighting", "poison", "flying", "ghost", "steel", "fairy"),
        "zero": (),
    },
    "rock": {"double": ("fire", "ice", "flying", "bug"), "half": ("fighting", "ground", "steel"), "zero": ()},
    "ghost": {"double": ("psychic", "ghost"), "half": ("dark",), "zero": ("normal",)},
    "dragon": {"double": ("dragon",), "half": ("steel",), "zero": ("fairy",)},
    "dark": {"double": ("psychic", "ghost"), "half": ("fighting", "dark", "fairy"), "zero": ()},
    "steel": {"double": ("ice", "rock", "fairy"), "half": ("fire", "water", "electric", "steel"), "zero": ()},
    "fairy": {"double": ("fighting", "dragon", "dark"), "half": ("fire", "poison", "steel"), "zero": ()},
}

ROMAN = ["", "i", "ii", "iii", "iv", "v", "vi", "vii", "viii", "ix"]


def chart_relations(type_name: str) -> Dict[str, Any]:
    chart = TYPE_CHART[type_name]
    return {
        "double_damage_to": [{"name": name} for name in chart["double"]],
        "half_damage_to": [{"name": name} for name in chart["half"]],
        "no_damage_to": [{"name": name} for name in chart["zero"]],
    }


def pokemon_payload(
    pokemon_id: int,
    name: str,
    types: Sequence[str],
    *,
    stats: Optional[Dict[str, int]] = None,
    sprite: Optional[str] = "sprite.png",
) -> Dict[str, Any]:
    stats = stats if stats is not None else {
        "hp": 45,
        "attack": 49,
        "defense": 49,
        "special-attack": 65,
        "special-defense": 65,
        "speed": 45,
    }
    return {
        "id": pokemon_id,
        "name": name,
        "height": 7,
        "weight": 69,
        # slots listed out of order on purpose
        "types": [
            {"slot": slot, "type": {"name": type_name}}
            for slot, type_name in reversed(list(enumerate(types, start=1)))
        ],
        "stats": [{"base_stat": value, "stat": {"name": key}} for key, value in stats.items()],
        "sprites": {"front_default": sprite},
        "abilities": [
            {"slot": 3, "is_hidden": True, "ability": {"name": "chlorophyll"}},
            {"slot": 1, "is_hidden": False, "ability": {"name": "overgrow"}},
        ],
    }


def species_payload(
    pokemon_id: int, ja_name: Optional[str], generation: int, *, roman: bool = True
) -> Dict[str, Any]:
    names = [{"name": f"{ja_name or 'x'}-en", "language": {"name": "en"}}]
    if ja_name:
        names.append({"name": ja_name, "language": {"name": "ja"}})
    label = f"generation-{ROMAN[generation]}" if roman else f"generation-{generation}"
    return {"id": pokemon_id, "names": names, "generation": {"name": label}}


class FakePokeAPI:
    """In-memory stand-in for ``PokeAPIClient``."""

    def __init__(
        self,
        pokemon: Optional[Dict[int, Dict[str, Any]]] = None,
        species: Optional[Dict[int, Dict[str, Any]]] = None,
        *,
        failing_pokemon: Iterable[int] = (),
        failing_species: Iterable[int] = (),
        failing_types: Iterable[str] = (),
        delay: float = 0.0,
    ) -> None:
        self.pokemon = pokemon or {}
        self.species = species or {}
        self.failing_pokemon = set(failing_pokemon)
        self.failing_species = set(failing_species)
        self.failing_types = set(failing_types)
        self.delay = delay
        self.calls: List[tuple[str, Any, bool]] = []
        self._lock = threading.Lock()
        self._active = 0
        self.peak_active = 0

    def _enter(self, kind: str, key: Any, fresh: bool) -> None:
        with self._lock:
            self.calls.append((kind, key, fresh))
            self._active += 1
            self.peak_active = max(self.peak_active, self._active)
        if self.delay:
            time.sleep(self.delay)

    def _exit(self) -> None:
        with self._lock:
            self._active -= 1

    def get_pokemon(self, pokemon_id, *, fresh: bool = False):
        self._enter("pokemon", pokemon_id, fresh)
        try:
            if pokemon_id in self.failing_pokemon:
                raise PokeAPIClientError(f"boom {pokemon_id}")
            if pokemon_id not in self.pokemon:
                raise PokeAPINotFound(f"pokemon/{pokemon_id}: not found")
            return self.pokemon[pokemon_id]
        finally:
            self._exit()

    def get_pokemon_species(self, pokemon_id, *, fresh: bool = False):
        self._enter("species", pokemon_id, fresh)
        try:
            if pokemon_id in self.failing_species:
                raise PokeAPIClientError(f"species boom {pokemon_id}")
            if pokemon_id not in self.species:
                raise PokeAPINotFound(f"pokemon-species/{pokemon_id}: not found")
            return self.species[pokemon_id]
        finally:
            self._exit()

    def get_type_damage_relations(self, type_name: str):
        self._enter("type", type_name, False)
        try:
            if type_name in self.failing_types:
                raise PokeAPIClientError(f"type boom {type_name}")
            return chart_relations(type_name)
        finally:
            self._exit()


def make_member(pokemon_id: int, name_en: str, types: Sequence[str], *, name: Optional[str] = None) -> RosterMember:
    return RosterMember(
        id=pokemon_id,
        name_en=name_en,
        name=name or name_en,
        types=tuple(types),
        sprite=f"{pokemon_id}.png",
        stats=BaseStats(hp=50, attack=50, defense=50, special_attack=50, special_defense=50, speed=50),
        generation=1,
    )


STARTERS = [
    make_member(1, "bulbasaur", ["grass", "poison"], name="フシギダネ"),
    make_member(4, "charmander", ["fire"], name="ヒトカゲ"),
    make_member(7, "squirtle", ["water"], name="ゼニガメ"),
]


def static_matrix() -> TypeMatrix:
    return TypeMatrix.from_relations({name: chart_relations(name) for name in TYPE_CHART})


@pytest.fixture
def fake_api_factory():
    return FakePokeAPI


@pytest.fixture
def starter_api() -> FakePokeAPI:
    pokemon = {
        1: pokemon_payload(1, "bulbasaur", ["grass", "poison"]),
        4: pokemon_payload(4, "charmander", ["fire"]),
        7: pokemon_payload(7, "squirtle", ["water"]),
    }
    species = {
        1: species_payload(1, "フシギダネ", 1),
        4: species_payload(4, "ヒトカゲ", 1),
        7: species_payload(7, "ゼニガメ", 1),
    }
    return FakePokeAPI(pokemon, species)


@pytest.fixture
def starter_cache() -> RosterCache:
    return RosterCache(STARTERS)


@pytest.fixture
def matrix_holder() -> TypeMatrixHolder:
    return TypeMatrixHolder(static_matrix())


@pytest.fixture
def generations():
    return load_generation_table()


@pytest.fixture
def ready_context(starter_api):
    """A context whose caches are already populated from the fake client."""

    context = create_context(Settings(roster_size=7, concurrency=3), client=starter_api)
    context.roster.replace(STARTERS)
    context.matrix.replace(static_matrix())
    return context
