"""Secondary-structure ranges and how they are painted onto residues.

Ranges come from PDB ``HELIX``/``SHEET`` records or from the mmCIF
``_struct_conf`` and ``_struct_sheet_range`` loops. Either way they are
addressed by (chain, residue number), while the store addresses residues
by insertion-ordered index, so a range is applied by finding its first
residue and walking forward until the number passes the end or the chain
changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from molsoup.core.logging_utils import get_logger
from molsoup.parsers.fields import split_tokens
from molsoup.store.base import StructureStore

logger = get_logger(__name__)

HELIX = "H"
SHEET = "E"

CIF_HELIX_LOOP = "_struct_conf.pdbx_PDB_helix_id"
CIF_SHEET_LOOP = "_struct_sheet_range.sheet_id"


@dataclass(frozen=True)
class SecondaryStructureRange:
    chain: str
    start: int
    end: int
    ss: str


UnmatchedCallback = Callable[[SecondaryStructureRange], None]


def apply_range(
    store: StructureStore,
    i_structure: int,
    ss_range: SecondaryStructureRange,
    on_unmatched: Optional[UnmatchedCallback] = None,
) -> int:
    """Paint ``ss_range.ss`` onto its residues; return how many were painted.

    An unknown start residue paints nothing and is not an error.
    """
    indices = store.find_residue_indices(i_structure, ss_range.chain, ss_range.start)
    if not indices:
        logger.debug("No residue %s:%d for %s range", ss_range.chain, ss_range.start, ss_range.ss)
        if on_unmatched is not None:
            on_unmatched(ss_range)
        return 0

    stop = store.residue_range(i_structure).stop
    residues = store.residues
    n_painted = 0
    i_res = indices[0]
    while i_res < stop:
        residue = residues[i_res]
        if residue.res_num > ss_range.end or residue.chain != ss_range.chain:
            break
        residue.ss = ss_range.ss
        n_painted += 1
        i_res += 1
    return n_painted


# ======================================================================
# PDB records
# ======================================================================

def parse_pdb_range(line: str) -> Optional[SecondaryStructureRange]:
    """Read a HELIX or SHEET record; None for any other line.

    Raises ``ValueError``/``IndexError`` on a malformed record.
    """
    if line.startswith("HELIX"):
        return SecondaryStructureRange(
            chain=line[19:20],
            start=int(line[21:25]),
            end=int(line[33:37]),
            ss=HELIX,
        )
    if line.startswith("SHEET"):
        return SecondaryStructureRange(
            chain=line[21:22],
            start=int(line[22:26]),
            end=int(line[33:37]),
            ss=SHEET,
        )
    return None


def is_pdb_ss_line(line: str) -> bool:
    return line.startswith("HELIX") or line.startswith("SHEET")


def iter_pdb_ranges(lines: list[str]) -> Iterator[SecondaryStructureRange]:
    for i_line, line in enumerate(lines):
        if not is_pdb_ss_line(line):
            continue
        try:
            ss_range = parse_pdb_range(line)
        except (ValueError, IndexError):
            logger.warning("Skipping malformed secondary-structure line %d: %r", i_line, line)
            continue
        if ss_range is not None:
            yield ss_range


# ======================================================================
# mmCIF loops
# ======================================================================

def iter_cif_loop_rows(lines: list[str], loop_start: str) -> Iterator[tuple[int, list[str]]]:
    """Yield (line index, tokens) for the data rows of one loop.

    The loop opens at the line starting with ``loop_start`` and closes at
    the next line starting with ``#``. Column definitions of the same
    category are skipped.
    """
    category = loop_start.split(".")[0]
    in_loop = False
    for i_line, line in enumerate(lines):
        if not in_loop:
            if not line.startswith(loop_start):
                continue
            in_loop = True
        if line.startswith("#"):
            break
        if line.startswith(category) or not line.strip():
            continue
        yield i_line, split_tokens(line.strip())


def _iter_cif_ranges(
    lines: list[str],
    loop_start: str,
    columns: tuple[int, int, int],
    ss: str,
) -> Iterator[SecondaryStructureRange]:
    i_chain, i_start, i_end = columns
    for i_line, tokens in iter_cif_loop_rows(lines, loop_start):
        try:
            yield SecondaryStructureRange(
                chain=tokens[i_chain],
                start=int(tokens[i_start]),
                end=int(tokens[i_end]),
                ss=ss,
            )
        except (ValueError, IndexError):
            logger.warning("Skipping malformed %s row at line %d: %r", loop_start, i_line, lines[i_line])


def iter_cif_helix_ranges(lines: list[str]) -> Iterator[SecondaryStructureRange]:
    # beg_label_asym_id, beg_label_seq_id, end_label_seq_id
    return _iter_cif_ranges(lines, CIF_HELIX_LOOP, (4, 5, 9), HELIX)


def iter_cif_sheet_ranges(lines: list[str]) -> Iterator[SecondaryStructureRange]:
    return _iter_cif_ranges(lines, CIF_SHEET_LOOP, (3, 4, 8), SHEET)
