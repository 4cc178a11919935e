"""mmCIF parser.

Reads ``_atom_site`` rows by token position (standard wwPDB column order)
into a structure store as one implicit model, then paints helices and
strands from the ``_struct_conf`` and ``_struct_sheet_range`` loops.

Residues with an explicit number are stored under ``auth_seq_id`` while the
loop ranges carry ``*_label_seq_id``, so ranges only line up where the two
numberings agree.
"""

from __future__ import annotations

from molsoup.config import load_settings
from molsoup.core.logging_utils import get_logger
from molsoup.parsers.base import NO_ATOM_LINES, StructureFormat, StructureParser, split_lines
from molsoup.parsers.fields import (
    ABSENT_TOKENS,
    ParsedAtom,
    absent_to_empty,
    infer_element,
    remove_quotes,
    split_tokens,
)
from molsoup.parsers.residue_numbering import ResidueNumbering, resolve_residue_number
from molsoup.parsers.secondary import (
    CIF_HELIX_LOOP,
    CIF_SHEET_LOOP,
    apply_range,
    iter_cif_helix_ranges,
    iter_cif_loop_rows,
    iter_cif_sheet_ranges,
)

logger = get_logger(__name__)

TITLE_KEY = "_struct.title"

# _atom_site token positions
TYPE_SYMBOL = 2
LABEL_ATOM_ID = 3
LABEL_ALT_ID = 4
LABEL_COMP_ID = 5
LABEL_ASYM_ID = 6
LABEL_ENTITY_ID = 7
LABEL_SEQ_ID = 8
INS_CODE = 9
CARTN_X = 10
CARTN_Y = 11
CARTN_Z = 12
B_ISO = 14
AUTH_SEQ_ID = 16


def parse_cif_atom(
    tokens: list[str],
    numbering: ResidueNumbering,
    water_residues: tuple[str, ...] = ("HOH",),
) -> tuple[ParsedAtom, ResidueNumbering]:
    """Build one atom from ``_atom_site`` tokens.

    Raises ``ValueError``/``IndexError`` when a required token is missing
    or not numeric; ``numbering`` is then left for the next line unchanged.
    """
    elem = tokens[TYPE_SYMBOL]
    atom_type = remove_quotes(tokens[LABEL_ATOM_ID])
    res_type = tokens[LABEL_COMP_ID]
    chain = tokens[LABEL_ASYM_ID]
    entity = tokens[LABEL_ENTITY_ID]
    x = float(tokens[CARTN_X])
    y = float(tokens[CARTN_Y])
    z = float(tokens[CARTN_Z])
    bfactor = float(tokens[B_ISO])
    auth_seq = tokens[AUTH_SEQ_ID] if len(tokens) > AUTH_SEQ_ID else None
    res_num, numbering = resolve_residue_number(
        numbering,
        tokens[LABEL_SEQ_ID],
        chain,
        entity,
        res_type,
        auth_seq=auth_seq,
        water_residues=water_residues,
    )

    if elem in ABSENT_TOKENS:
        elem = ""
    if not elem:
        elem = infer_element(atom_type)
    if not elem:
        raise ValueError(f"no element for atom name {atom_type!r}")

    atom = ParsedAtom(
        x=x,
        y=y,
        z=z,
        bfactor=bfactor,
        alt=absent_to_empty(tokens[LABEL_ALT_ID]),
        atom_type=atom_type,
        elem=elem,
        res_type=res_type,
        res_num=res_num,
        ins_code=absent_to_empty(tokens[INS_CODE]),
        chain=chain,
    )
    return atom, numbering


def _read_text_field(lines: list[str], i_line: int) -> str:
    """Collect a ';'-delimited multi-line value starting at ``i_line``."""
    parts = [lines[i_line][1:].strip()]
    for line in lines[i_line + 1:]:
        if line.startswith(";"):
            break
        parts.append(line.strip())
    return " ".join(p for p in parts if p)


class CifParser(StructureParser):
    """Parse mmCIF text (.cif, .mmcif) into a structure store."""

    format = StructureFormat.CIF

    def parse_atom_lines(self, lines: list[str]) -> int:
        numbering = ResidueNumbering()
        water = tuple(self.settings.water_residues)
        n_atoms = 0
        for i_line, line in enumerate(lines):
            if not self.is_atom_line(line):
                continue
            tokens = split_tokens(line)
            try:
                atom, numbering = parse_cif_atom(tokens, numbering, water)
            except (ValueError, IndexError) as e:
                self.record_error(f"line {i_line}")
                logger.warning("parse_atom_lines %s: %r", e, line)
                continue
            self.store.add_atom(*atom.as_tuple())
            n_atoms += 1
        return n_atoms

    def parse_secondary_structure_lines(self, lines: list[str]) -> int:
        self.has_secondary_structure = False
        i_structure = self.store.i_structure
        self.store.assign_residue_properties(i_structure)
        n_painted = self.parse_helix_lines(lines) + self.parse_sheet_lines(lines)
        return n_painted

    def parse_helix_lines(self, lines: list[str]) -> int:
        if any(True for _ in iter_cif_loop_rows(lines, CIF_HELIX_LOOP)):
            self.has_secondary_structure = True
        return sum(
            apply_range(self.store, self.store.i_structure, r, self.on_unmatched)
            for r in iter_cif_helix_ranges(lines)
        )

    def parse_sheet_lines(self, lines: list[str]) -> int:
        if any(True for _ in iter_cif_loop_rows(lines, CIF_SHEET_LOOP)):
            self.has_secondary_structure = True
        return sum(
            apply_range(self.store, self.store.i_structure, r, self.on_unmatched)
            for r in iter_cif_sheet_ranges(lines)
        )

    def parse_title(self, lines: list[str]) -> str:
        for i_line, line in enumerate(lines):
            if line.startswith(TITLE_KEY):
                rest = line[len(TITLE_KEY):].strip()
                if rest:
                    return remove_quotes(rest)
            if i_line > 0 and lines[i_line - 1].startswith(TITLE_KEY):
                if line.startswith(";"):
                    return _read_text_field(lines, i_line)
                return remove_quotes(line.strip())
        return ""

    def parse(self, text: str, structure_id: str) -> None:
        lines = split_lines(text)
        if not self.has_atom_lines(lines):
            self.record_error(NO_ATOM_LINES)
            logger.warning("%s: no atom lines", structure_id)
            return
        self.push_structure(structure_id, self.parse_title(lines))
        n_atoms = self.parse_atom_lines(lines)
        n_ss = self.parse_secondary_structure_lines(lines)
        logger.debug("%s: %d atoms, %d residues with secondary structure", structure_id, n_atoms, n_ss)

    @staticmethod
    def extensions() -> list[str]:
        return list(load_settings().cif_extensions)
