"""Call the poke-party FastMCP tools over HTTP.

Usage:
    python scripts/mcp_client.py analyze 1 4 7
    python scripts/mcp_client.py list --type fire,flying --generation 1
    python scripts/mcp_client.py detail 25
    python scripts/mcp_client.py tools
"""
from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from fastmcp import Client


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--url",
        default="http://localhost:3333/mcp",
        help="MCP endpoint exposed by the FastMCP server",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("tools", help="List the tools the server exposes")

    analyze = commands.add_parser("analyze", help="Type coverage for 1-6 pokemon ids")
    analyze.add_argument("pokemon_ids", nargs="+", type=int)

    detail = commands.add_parser("detail", help="Live detail for one pokemon")
    detail.add_argument("pokemon_id", type=int)

    listing = commands.add_parser("list", help="Filtered roster page")
    listing.add_argument("--page", type=int, default=1)
    listing.add_argument("--limit", type=int, default=20)
    listing.add_argument("--generation", type=int)
    listing.add_argument("--type", dest="types")
    listing.add_argument("--search")
    return parser


def _tool_call(args: argparse.Namespace) -> tuple[str, dict[str, Any]]:
    if args.command == "analyze":
        return "analyze_team_coverage", {"pokemon_ids": args.pokemon_ids}
    if args.command == "detail":
        return "get_pokemon_detail", {"pokemon_id": args.pokemon_id}
    params: dict[str, Any] = {"page": args.page, "limit": args.limit}
    for key in ("generation", "types", "search"):
        value = getattr(args, key)
        if value is not None:
            params[key] = value
    return "list_pokemon", params


def _result_payload(result: Any) -> Any:
    data = getattr(result, "data", None)
    if data is not None:
        return data
    content = getattr(result, "content", None) or []
    texts = [getattr(block, "text", "") for block in content]
    return "\n".join(text for text in texts if text)


async def _main_async() -> None:
    args = _build_parser().parse_args()

    async with Client(args.url) as client:
        await client.ping()
        if args.command == "tools":
            for tool in await client.list_tools():
                print(f"- {tool.name}: {tool.description or ''}".rstrip())
            return

        tool, params = _tool_call(args)
        result = await client.call_tool(tool, params)
        print(json.dumps(_result_payload(result), indent=2, ensure_ascii=False, default=str))


def main() -> None:
    asyncio.run(_main_async())


if __name__ == "__main__":
    main()
