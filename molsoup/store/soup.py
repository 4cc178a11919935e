"""In-memory structure store ("soup") filled by the format parsers.

Atoms and residues of every pushed structure live in two flat,
insertion-ordered lists. A structure owns a contiguous slice of each.
Residues are bucketed on the fly: a new residue opens whenever
(chain, res_num, ins_code) differs from the residue currently open.

Hierarchy:
    Soup
    ├── structures: list[StructureEntry]
    ├── residues: list[ResidueRecord]   (ss is writable)
    └── atoms: list[AtomRecord]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from molsoup.core.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AtomRecord:
    """Single atom as stored by the soup."""

    x: float
    y: float
    z: float
    bfactor: float
    alt: str
    atom_type: str
    elem: str
    i_res: int

    @property
    def pos(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass
class ResidueRecord:
    """Residue bucket; ``ss`` is painted by the secondary-structure pass."""

    i_structure: int
    chain: str
    res_num: int
    ins_code: str
    res_type: str
    ss: str = ""
    atom_indices: list[int] = field(default_factory=list)

    @property
    def res_id(self) -> str:
        return f"{self.chain}:{self.res_num}{self.ins_code}"

    @property
    def num_atoms(self) -> int:
        return len(self.atom_indices)


@dataclass
class StructureEntry:
    structure_id: str
    title: str
    residue_start: int
    residue_stop: int
    atom_start: int
    atom_stop: int

    @property
    def num_residues(self) -> int:
        return self.residue_stop - self.residue_start

    @property
    def num_atoms(self) -> int:
        return self.atom_stop - self.atom_start


class Soup:
    """Concrete :class:`~molsoup.store.base.StructureStore` kept in memory.

    Usage::

        from molsoup.store import Soup
        from molsoup.parsers import PdbParser

        soup = Soup()
        PdbParser(soup).parse(text, "1abc")
        print(soup.ss_string(0))
    """

    def __init__(self) -> None:
        self.structures: list[StructureEntry] = []
        self.atoms: list[AtomRecord] = []
        self._residues: list[ResidueRecord] = []
        self.i_structure: Optional[int] = None
        self._residue_lookup: dict[int, dict[tuple[str, int], list[int]]] = {}

    @property
    def residues(self) -> list[ResidueRecord]:
        return self._residues

    @property
    def atom_count(self) -> int:
        return len(self.atoms)

    @property
    def residue_count(self) -> int:
        return len(self._residues)

    @property
    def structure_ids(self) -> list[str]:
        return [s.structure_id for s in self.structures]

    # ------------------------------------------------------------------
    # Mutation API used by the parsers
    # ------------------------------------------------------------------

    def push_structure_id(self, structure_id: str, title: str) -> None:
        self.structures.append(StructureEntry(
            structure_id=structure_id,
            title=title,
            residue_start=len(self._residues),
            residue_stop=len(self._residues),
            atom_start=len(self.atoms),
            atom_stop=len(self.atoms),
        ))
        self.i_structure = len(self.structures) - 1
        logger.debug("Pushed structure %s (index %d)", structure_id, self.i_structure)

    def add_atom(
        self,
        x: float,
        y: float,
        z: float,
        bfactor: float,
        alt: str,
        atom_type: str,
        elem: str,
        res_type: str,
        res_num: int,
        ins_code: str,
        chain: str,
    ) -> None:
        if self.i_structure is None:
            raise RuntimeError("push_structure_id must be called before add_atom")
        entry = self.structures[self.i_structure]

        residue = self._residues[-1] if entry.num_residues else None
        if (
            residue is None
            or residue.chain != chain
            or residue.res_num != res_num
            or residue.ins_code != ins_code
        ):
            residue = ResidueRecord(
                i_structure=self.i_structure,
                chain=chain,
                res_num=res_num,
                ins_code=ins_code,
                res_type=res_type,
            )
            self._residues.append(residue)
            entry.residue_stop = len(self._residues)
            self._residue_lookup.pop(self.i_structure, None)

        residue.atom_indices.append(len(self.atoms))
        self.atoms.append(AtomRecord(
            x=x,
            y=y,
            z=z,
            bfactor=bfactor,
            alt=alt,
            atom_type=atom_type,
            elem=elem,
            i_res=len(self._residues) - 1,
        ))
        entry.atom_stop = len(self.atoms)

    def assign_residue_properties(self, i_structure: int) -> None:
        """Index the residues of one structure by (chain, res_num)."""
        lookup: dict[tuple[str, int], list[int]] = {}
        for i_res in self.residue_range(i_structure):
            residue = self._residues[i_res]
            lookup.setdefault((residue.chain, residue.res_num), []).append(i_res)
        self._residue_lookup[i_structure] = lookup

    def residue_range(self, i_structure: int) -> range:
        entry = self.structures[i_structure]
        return range(entry.residue_start, entry.residue_stop)

    def find_residue_indices(self, i_structure: int, chain: str, res_num: int) -> list[int]:
        if i_structure not in self._residue_lookup:
            raise KeyError(
                f"Residues of structure {i_structure} are not indexed; "
                "call assign_residue_properties first"
            )
        return list(self._residue_lookup[i_structure].get((chain, res_num), []))

    # ------------------------------------------------------------------
    # Read-side helpers for consumers
    # ------------------------------------------------------------------

    def get_structure(self, i_structure: int) -> StructureEntry:
        return self.structures[i_structure]

    def get_residues(self, i_structure: int) -> list[ResidueRecord]:
        entry = self.get_structure(i_structure)
        return self._residues[entry.residue_start:entry.residue_stop]

    def get_chains(self, i_structure: int) -> list[str]:
        """Chain ids of a structure in order of first appearance."""
        chains: list[str] = []
        for residue in self.get_residues(i_structure):
            if residue.chain not in chains:
                chains.append(residue.chain)
        return chains

    def ss_string(self, i_structure: int) -> str:
        """One character per residue; coil is written as '-'."""
        return "".join(r.ss or "-" for r in self.get_residues(i_structure))

    def coords(self, i_structure: Optional[int] = None) -> np.ndarray:
        """Atom positions as an (n, 3) float array."""
        if i_structure is None:
            atoms = self.atoms
        else:
            entry = self.get_structure(i_structure)
            atoms = self.atoms[entry.atom_start:entry.atom_stop]
        if not atoms:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([a.pos for a in atoms], dtype=np.float64)

    def summary(self, i_structure: int) -> dict:
        """Flat dict for table / DataFrame usage."""
        entry = self.get_structure(i_structure)
        residues = self.get_residues(i_structure)
        return {
            "structure_id": entry.structure_id,
            "title": entry.title,
            "chain_count": len(self.get_chains(i_structure)),
            "residue_count": entry.num_residues,
            "atom_count": entry.num_atoms,
            "helix_residue_count": sum(1 for r in residues if r.ss == "H"),
            "sheet_residue_count": sum(1 for r in residues if r.ss == "E"),
        }

    def __repr__(self) -> str:
        return (
            f"<Soup structures={len(self.structures)} "
            f"residues={self.residue_count} atoms={self.atom_count}>"
        )
