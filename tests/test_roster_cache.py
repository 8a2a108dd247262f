"""Tests for the startup roster cache build."""

from __future__ import annotations

import asyncio
import logging

from poke_party.data import load_generation_table
from poke_party.models import FetchOutcome, RosterFilters
from poke_party.services import RosterCache, RosterCacheBuilder, RosterQueryEngine

from conftest import FakePokeAPI, make_member, pokemon_payload, species_payload


def _roster_api(count: int, **kwargs) -> FakePokeAPI:
    generations = load_generation_table()
    pokemon = {}
    species = {}
    for pokemon_id in range(1, count + 1):
        pokemon[pokemon_id] = pokemon_payload(
            pokemon_id,
            f"mon-{pokemon_id}",
            ["normal"],
            stats={"hp": pokemon_id, "attack": 1, "defense": 2, "special-attack": 3, "special-defense": 4, "speed": 5},
        )
        species[pokemon_id] = species_payload(
            pokemon_id, f"モン{pokemon_id}", generations.generation_of(pokemon_id)
        )
    return FakePokeAPI(pokemon, species, **kwargs)


def test_build_returns_members_in_ascending_id_order() -> None:
    api = _roster_api(12)
    builder = RosterCacheBuilder(api, roster_size=12, concurrency=5)

    members = asyncio.run(builder.build())

    assert [member.id for member in members] == list(range(1, 13))
    assert members[0].name == "モン1"
    assert members[0].name_en == "mon-1"


def test_build_skips_failed_ids_and_logs_warning(caplog) -> None:
    api = _roster_api(10, failing_pokemon={3}, failing_species={8})
    builder = RosterCacheBuilder(api, roster_size=10, concurrency=4)

    with caplog.at_level(logging.WARNING):
        members = asyncio.run(builder.build())

    assert [member.id for member in members] == [1, 2, 4, 5, 6, 7, 9, 10]
    assert "pokemon #3" in caplog.text
    assert "pokemon #8" in caplog.text


class _SlowLowIdBuilder(RosterCacheBuilder):
    """Lower ids answer slower, so they finish last."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.finished: list[int] = []

    async def fetch_one(self, pokemon_id: int) -> FetchOutcome:
        await asyncio.sleep(0.05 * (self.roster_size + 1 - pokemon_id))
        outcome = await super().fetch_one(pokemon_id)
        self.finished.append(pokemon_id)
        return outcome


def test_build_order_ignores_completion_order() -> None:
    api = _roster_api(6)
    builder = _SlowLowIdBuilder(api, roster_size=6, concurrency=6)

    members = asyncio.run(builder.build())

    assert builder.finished == [6, 5, 4, 3, 2, 1]
    assert [member.id for member in members] == [1, 2, 3, 4, 5, 6]


def test_malformed_species_record_is_skipped() -> None:
    api = _roster_api(3)
    api.species[2]["generation"] = "generation-i"
    builder = RosterCacheBuilder(api, roster_size=3, concurrency=3)

    members = asyncio.run(builder.build())

    assert [member.id for member in members] == [1, 3]


def test_nameless_pokemon_is_skipped_and_search_still_works(caplog) -> None:
    api = _roster_api(3)
    api.pokemon[2]["name"] = None
    builder = RosterCacheBuilder(api, roster_size=3, concurrency=3)

    with caplog.at_level(logging.WARNING):
        cache = asyncio.run(builder.rebuild(RosterCache()))

    assert [member.id for member in cache] == [1, 3]
    assert "pokemon #2" in caplog.text
    engine = RosterQueryEngine(cache, api, load_generation_table())
    assert [member.id for member in engine.get_list(RosterFilters(search="mon")).data] == [1, 3]


def test_build_with_no_successful_fetches_is_an_empty_roster() -> None:
    builder = RosterCacheBuilder(FakePokeAPI(), roster_size=5, concurrency=2)

    assert asyncio.run(builder.build()) == []


def test_build_bounds_outbound_concurrency() -> None:
    api = _roster_api(20, delay=0.01)
    builder = RosterCacheBuilder(api, roster_size=20, concurrency=3)

    asyncio.run(builder.build())

    # each in-flight id issues a pokemon and a species request
    assert api.peak_active <= 2 * 3
    assert len(api.calls) == 40


def test_cached_entries_have_consistent_totals_and_generations() -> None:
    generations = load_generation_table()
    ids = [1, 151, 152, 387, 906, 1025]
    pokemon = {i: pokemon_payload(i, f"mon-{i}", ["fire"]) for i in ids}
    species = {i: species_payload(i, None, generations.generation_of(i)) for i in ids}
    api = FakePokeAPI(pokemon, species)

    members = asyncio.run(
        RosterCacheBuilder(api, roster_size=1025, concurrency=50, generations=generations).build()
    )

    assert [member.id for member in members] == ids
    for member in members:
        stats = member.stats
        assert stats.total == (
            stats.hp + stats.attack + stats.defense + stats.special_attack + stats.special_defense + stats.speed
        )
        low, high = generations.range_for(member.generation)
        assert low <= member.id <= high
        # no "ja" name upstream -> English fallback
        assert member.name == member.name_en


def test_rebuild_replaces_snapshot_wholesale() -> None:
    cache = RosterCache([make_member(99, "old", ["normal"])])
    old_snapshot = cache.snapshot()
    builder = RosterCacheBuilder(_roster_api(3), roster_size=3, concurrency=2)

    asyncio.run(builder.rebuild(cache))

    assert [member.id for member in cache] == [1, 2, 3]
    assert 99 not in cache
    assert [member.id for member in old_snapshot] == [99]


def test_collect_keeps_only_successful_outcomes() -> None:
    member = make_member(1, "bulbasaur", ["grass", "poison"])
    outcomes = [
        FetchOutcome(pokemon_id=1, member=member),
        FetchOutcome(pokemon_id=2, error="timeout"),
    ]

    assert RosterCacheBuilder.collect(outcomes) == [member]


def test_empty_cache_is_not_ready() -> None:
    cache = RosterCache()

    assert not cache.is_ready
    assert cache.get(1) is None
    cache.replace([])
    assert cache.is_ready
    assert len(cache) == 0
