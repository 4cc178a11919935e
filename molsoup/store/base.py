from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ResidueView(Protocol):
    """What the secondary-structure annotator reads and writes on a residue."""

    chain: str
    res_num: int
    ss: str


@runtime_checkable
class StructureStore(Protocol):
    """Mutation interface the parsers drive.

    Keep it tiny on purpose:
      - open a structure, then append atoms to it
      - make its residues addressable by (chain, residue number)
      - expose residues as one contiguous, index-addressable sequence
    """

    i_structure: Optional[int]

    @property
    def residues(self) -> Sequence[ResidueView]: ...

    def push_structure_id(self, structure_id: str, title: str) -> None: ...

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
    ) -> None: ...

    def assign_residue_properties(self, i_structure: int) -> None: ...

    def residue_range(self, i_structure: int) -> range: ...

    def find_residue_indices(self, i_structure: int, chain: str, res_num: int) -> list[int]: ...
