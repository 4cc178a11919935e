"""Raw-line field extraction shared by the PDB and mmCIF parsers.

PDB records are sliced at fixed columns; mmCIF records are split into
tokens. Nothing here catches errors: a short or malformed line raises
``ValueError``/``IndexError`` and the calling driver records it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

ABSENT_TOKENS = (".", "?")

_TOKEN_SPLIT = re.compile(r"[ ,]+")
_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class ParsedAtom:
    """One atom record in the argument order of ``StructureStore.add_atom``."""

    x: float
    y: float
    z: float
    bfactor: float
    alt: str
    atom_type: str
    elem: str
    res_type: str
    res_num: int
    ins_code: str
    chain: str

    def as_tuple(self) -> tuple:
        return (
            self.x,
            self.y,
            self.z,
            self.bfactor,
            self.alt,
            self.atom_type,
            self.elem,
            self.res_type,
            self.res_num,
            self.ins_code,
            self.chain,
        )


def delete_numbers(text: str) -> str:
    return _DIGITS.sub("", text)


def remove_quotes(s: str) -> str:
    """Strip one pair of matching single or double quotes."""
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        return s[1:-1]
    return s


def infer_element(atom_type: str) -> str:
    return delete_numbers(atom_type.strip())[:1]


def split_tokens(line: str) -> list[str]:
    """Split an mmCIF data row on runs of spaces and commas."""
    return _TOKEN_SPLIT.split(line)


def absent_to_empty(token: str) -> str:
    return "" if token in ABSENT_TOKENS else token


# ======================================================================
# PDB fixed columns (0-indexed, end exclusive)
# ======================================================================

def pdb_int(line: str, start: int, stop: int) -> int:
    return int(line[start:stop])


def pdb_float(line: str, start: int, stop: int) -> float:
    return float(line[start:stop])


def parse_pdb_atom(line: str) -> ParsedAtom:
    """Slice an ATOM/HETATM record.

    Raises ``ValueError`` or ``IndexError`` when a required column is
    missing or not numeric.
    """
    atom_type = line[12:16].strip()
    elem = delete_numbers(line[76:78].strip())
    if not elem:
        elem = infer_element(atom_type)
    if not elem:
        raise ValueError(f"no element for atom name {atom_type!r}")
    return ParsedAtom(
        x=pdb_float(line, 30, 38),
        y=pdb_float(line, 38, 46),
        z=pdb_float(line, 46, 54),
        bfactor=pdb_float(line, 60, 66),
        alt=line[16:17].strip(),
        atom_type=atom_type,
        elem=elem,
        res_type=line[17:20].strip(),
        res_num=pdb_int(line, 22, 26),
        ins_code=line[26:27].strip(),
        chain=line[21],
    )
