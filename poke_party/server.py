"""FastMCP server exposing roster lookups and team type coverage as tools."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from fastmcp import FastMCP

from .analysis import PokemonNotFoundError
from .config import configure_logging, load_settings
from .models import RosterFilters
from .services.context import PartyContext, create_context

app = FastMCP("poke-party", version="0.1.0")
_context: Optional[PartyContext] = None


def get_context() -> PartyContext:
    global _context
    if _context is None:
        _context = create_context()
    return _context


@app.tool()
async def list_pokemon(
    page: Annotated[int, "Page number starting at 1"] = 1,
    limit: Annotated[int, "Entries per page"] = 20,
    generation: Annotated[Optional[int], "Generation number (1-9)"] = None,
    types: Annotated[Optional[str], "Comma-separated types, all must match"] = None,
    search: Annotated[Optional[str], "Name substring (English or localized)"] = None,
) -> Dict[str, Any]:
    """List cached Pokémon with pagination and filters."""

    context = await get_context().ensure_ready()
    filters = RosterFilters(
        page=max(1, page), limit=max(1, limit), generation=generation, types=types, search=search
    )
    return context.query.get_list(filters).to_payload()


@app.tool()
async def get_pokemon_detail(
    pokemon_id: Annotated[int, "National Pokédex number"],
) -> Dict[str, Any]:
    """Fetch live detail (abilities, height, weight) for one Pokémon."""

    detail = await get_context().query.get_detail(pokemon_id)
    if detail is None:
        return {"error": f"Pokemon with id {pokemon_id} not found"}
    return detail.to_payload()


@app.tool()
async def analyze_team_coverage(
    pokemon_ids: Annotated[List[int], "One to six National Pokédex numbers"],
) -> Dict[str, Any]:
    """Return the team's worst-case multiplier per attacking type."""

    context = await get_context().ensure_ready()
    try:
        coverage = context.analyzer.analyze(pokemon_ids)
    except PokemonNotFoundError as exc:
        return {"error": str(exc), "pokemonId": exc.pokemon_id}
    except ValueError as exc:
        return {"error": str(exc)}
    return coverage.to_payload()


def run() -> None:
    """Entry point for `python -m poke_party.server` or console script."""

    configure_logging(load_settings().log_level)
    print("[poke-party] Starting MCP server. Press Ctrl+C to stop.")
    app.run()


if __name__ == "__main__":
    run()
