"""Static reference data bundled with the package."""

from .generations import GenerationTable, load_generation_table

__all__ = ["GenerationTable", "load_generation_table"]
