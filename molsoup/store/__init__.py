"""molsoup.store — the structure store the parsers fill."""

from molsoup.store.base import ResidueView, StructureStore
from molsoup.store.soup import AtomRecord, ResidueRecord, Soup, StructureEntry

__all__ = [
    "StructureStore",
    "ResidueView",
    "Soup",
    "StructureEntry",
    "ResidueRecord",
    "AtomRecord",
]
