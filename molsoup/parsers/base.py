"""Shared shape of the format parsers.

Each format implements the same four operations:

    is_atom_line                      classify a raw line
    parse_atom_lines                  atoms -> store.add_atom
    parse_secondary_structure_lines   ranges -> residue.ss
    parse_title                       title text

and ``parse(text, structure_id)`` drives them against one store. Errors on
single records are recorded, never raised: ``error`` holds the last one,
``errors`` all of them in order.
"""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from typing import Optional

from molsoup.config import MolsoupSettings, load_settings
from molsoup.core.logging_utils import get_logger
from molsoup.parsers.secondary import UnmatchedCallback
from molsoup.store.base import StructureStore

logger = get_logger(__name__)

NO_ATOM_LINES = "No atom lines"

_LINE_SPLIT = re.compile(r"\r?\n")


class StructureFormat(str, enum.Enum):
    PDB = "pdb"
    CIF = "cif"


def split_lines(text: str) -> list[str]:
    return _LINE_SPLIT.split(text)


class StructureParser(ABC):
    """Parse the text of one structure file into a store."""

    format: StructureFormat

    def __init__(
        self,
        store: StructureStore,
        settings: Optional[MolsoupSettings] = None,
        on_unmatched: Optional[UnmatchedCallback] = None,
    ):
        self.store = store
        self.settings = settings or load_settings()
        self.on_unmatched = on_unmatched
        self.has_secondary_structure = False
        self.error = ""
        self.errors: list[str] = []
        self.structure_ids: list[str] = []

    def is_atom_line(self, line: str) -> bool:
        return line.startswith("ATOM") or line.startswith("HETATM")

    def has_atom_lines(self, lines: list[str]) -> bool:
        return any(self.is_atom_line(line) for line in lines)

    def record_error(self, message: str) -> None:
        self.error = message
        self.errors.append(message)

    def push_structure(self, structure_id: str, title: str) -> None:
        self.store.push_structure_id(structure_id, title)
        self.structure_ids.append(structure_id)

    @abstractmethod
    def parse_atom_lines(self, lines: list[str]) -> int:
        """Add the atoms of ``lines`` to the current structure; return the count."""
        ...

    @abstractmethod
    def parse_secondary_structure_lines(self, lines: list[str]) -> int:
        """Paint ranges onto the current structure; return residues painted."""
        ...

    @abstractmethod
    def parse_title(self, lines: list[str]) -> str: ...

    @abstractmethod
    def parse(self, text: str, structure_id: str) -> None:
        """Parse a whole file held in memory."""
        ...

    @staticmethod
    @abstractmethod
    def extensions() -> list[str]:
        """File extensions this parser handles (e.g. ['.cif', '.cif.gz'])."""
        ...
