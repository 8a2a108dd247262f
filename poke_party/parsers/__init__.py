"""Parsers that turn raw upstream payloads into roster records."""

from .pokeapi import (
    build_detail,
    build_member,
    extract_generation,
    extract_stats,
    extract_types,
    localized_name,
)

__all__ = [
    "build_detail",
    "build_member",
    "extract_generation",
    "extract_stats",
    "extract_types",
    "localized_name",
]
