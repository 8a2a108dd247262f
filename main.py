"""Command-line interface for running team type-coverage analysis."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace

from poke_party.analysis import PokemonNotFoundError, TypeMatrixBuildError
from poke_party.config import configure_logging, load_settings
from poke_party.models import TeamCoverage
from poke_party.services.context import PartyContext, build_context


def _humanize_report(context: PartyContext, member_ids: list[int], coverage: TeamCoverage) -> str:
    lines: list[str] = []
    members = context.query.enrich_members(member_ids)
    lines.append("Team: " + ", ".join(f"{m.name_en} ({'/'.join(m.types)})" for m in members))
    lines.append(
        f"Weaknesses: {coverage.weakness_count}  "
        f"Resistances: {coverage.resistance_count}  "
        f"Immunities: {coverage.immunity_count}"
    )
    lines.append("")

    lines.append("Defensive multipliers:")
    for attack_type, multiplier in coverage.defensive.items():
        marker = ""
        if multiplier >= 2:
            marker = "  <- weak"
        elif multiplier == 0:
            marker = "  <- immune"
        elif multiplier <= 0.5:
            marker = "  <- resists"
        lines.append(f"  - {attack_type:<9} {multiplier:g}x{marker}")

    return "\n".join(lines).strip()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze a Pokemon party's defensive type coverage")
    parser.add_argument(
        "pokemon_ids",
        nargs="+",
        type=int,
        help="One to six National Pokédex numbers",
    )
    parser.add_argument(
        "--roster-size",
        type=int,
        help="Only cache ids 1..N (default: the generation table's roster size)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the coverage report as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print debug progress information to stderr",
    )
    args = parser.parse_args(argv)

    if not 1 <= len(args.pokemon_ids) <= 6:
        parser.error("provide between 1 and 6 pokemon ids")

    settings = load_settings()
    if args.roster_size is not None:
        settings = replace(settings, roster_size=args.roster_size)
    configure_logging("DEBUG" if args.debug else settings.log_level)
    logging.getLogger(__name__).debug("Arguments parsed: %s", args)

    try:
        context = asyncio.run(build_context(settings))
        coverage = context.analyzer.analyze(args.pokemon_ids)
    except TypeMatrixBuildError as exc:
        raise SystemExit(f"Type data unavailable: {exc}")
    except PokemonNotFoundError as exc:
        raise SystemExit(str(exc))

    if args.json:
        json.dump(coverage.to_payload(), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(_humanize_report(context, args.pokemon_ids, coverage))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
