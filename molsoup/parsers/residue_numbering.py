"""Residue numbering for mmCIF atom records.

``label_seq_id`` is ``.`` for non-polymer atoms (ligands, water), so the
residue number has to be derived from context: consecutive atoms of the
same (chain, entity) belong to the residue already open, and every water
molecule is a residue of its own even though all waters share one chain
and entity. When ``label_seq_id`` is given, the author number is adopted
and becomes the base for the next derived number.

The scan state is an immutable value threaded through each atom::

    state = ResidueNumbering()
    for tokens in rows:
        res_num, state = resolve_residue_number(state, tokens[8], ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

WATER_RESIDUES = ("HOH",)


@dataclass(frozen=True)
class ResidueNumbering:
    next_res_num: int = 0
    last_chain: Optional[str] = None
    last_entity: Optional[str] = None


def resolve_residue_number(
    state: ResidueNumbering,
    label_seq: str,
    chain: str,
    entity: str,
    res_type: str,
    auth_seq: Optional[str] = None,
    water_residues: Iterable[str] = WATER_RESIDUES,
) -> tuple[int, ResidueNumbering]:
    """Return the residue number for one atom and the state for the next.

    Raises ``ValueError`` when an explicit number is not an integer.
    """
    if label_seq == ".":
        same_residue = (
            chain == state.last_chain
            and entity == state.last_entity
            and res_type not in tuple(water_residues)
        )
        if same_residue:
            return state.next_res_num, state
        res_num = state.next_res_num + 1
        return res_num, ResidueNumbering(res_num, chain, entity)

    res_num = int(auth_seq if auth_seq not in (None, "", ".", "?") else label_seq)
    return res_num, ResidueNumbering(res_num + 1, chain, entity)
