"""External data clients used by the team builder."""

from .pokeapi import PokeAPIClient, PokeAPIClientError, PokeAPINotFound

__all__ = [
    "PokeAPIClient",
    "PokeAPIClientError",
    "PokeAPINotFound",
]
