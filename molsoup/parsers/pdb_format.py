"""Legacy PDB format parser.

Fixed-column records are read into a structure store. A file holding
several models (``MODEL``/``ENDMDL`` blocks, or any ``END*`` terminator)
gives one structure per model, named ``<id>[1]``, ``<id>[2]``, ...

NMR ensembles are the exception: when ``EXPDTA`` mentions NMR, scanning
stops at the first terminator and only the first conformer is kept.
"""

from __future__ import annotations

from molsoup.config import load_settings
from molsoup.core.logging_utils import get_logger
from molsoup.parsers.base import NO_ATOM_LINES, StructureFormat, StructureParser, split_lines
from molsoup.parsers.fields import parse_pdb_atom
from molsoup.parsers.secondary import apply_range, is_pdb_ss_line, iter_pdb_ranges

logger = get_logger(__name__)


def is_nmr(lines: list[str]) -> bool:
    return any(line.startswith("EXPDTA") and "NMR" in line for line in lines)


def split_models(lines: list[str], is_atom_line, nmr: bool = False) -> list[list[str]]:
    """Group atom lines into models, dropping models without atoms."""
    models: list[list[str]] = [[]]
    for line in lines:
        if is_atom_line(line):
            models[-1].append(line)
        elif line.startswith("END"):
            if nmr:
                break
            models.append([])
    return [model for model in models if model]


class PdbParser(StructureParser):
    """Parse PDB-format text (.pdb, .pdb1, .ent) into a structure store."""

    format = StructureFormat.PDB

    def parse_atom_lines(self, lines: list[str]) -> int:
        n_atoms = 0
        for i_line, line in enumerate(lines):
            if not self.is_atom_line(line):
                continue
            try:
                atom = parse_pdb_atom(line)
            except (ValueError, IndexError) as e:
                self.record_error(f"line {i_line}")
                logger.warning("parse_atom_lines %s: %r", e, line)
                continue
            self.store.add_atom(*atom.as_tuple())
            n_atoms += 1
        return n_atoms

    def parse_secondary_structure_lines(self, lines: list[str]) -> int:
        i_structure = self.store.i_structure
        self.store.assign_residue_properties(i_structure)
        if any(is_pdb_ss_line(line) for line in lines):
            self.has_secondary_structure = True
        n_painted = 0
        for ss_range in iter_pdb_ranges(lines):
            n_painted += apply_range(self.store, i_structure, ss_range, self.on_unmatched)
        return n_painted

    def parse_title(self, lines: list[str]) -> str:
        return "".join(line[10:].rstrip() for line in lines if line.startswith("TITLE"))

    def parse(self, text: str, structure_id: str) -> None:
        lines = split_lines(text)
        if not self.has_atom_lines(lines):
            self.record_error(NO_ATOM_LINES)
            logger.warning("%s: no atom lines", structure_id)
            return

        title = self.parse_title(lines)
        models = split_models(lines, self.is_atom_line, nmr=is_nmr(lines))

        n_model = len(models)
        for i_model, model in enumerate(models):
            model_id = structure_id
            if n_model > 1:
                model_id = f"{structure_id}[{i_model + 1}]"
            self.push_structure(model_id, title)
            n_atoms = self.parse_atom_lines(model)
            n_ss = self.parse_secondary_structure_lines(lines)
            logger.debug("%s: %d atoms, %d residues with secondary structure", model_id, n_atoms, n_ss)

    @staticmethod
    def extensions() -> list[str]:
        return list(load_settings().pdb_extensions)
