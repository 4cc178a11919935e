"""molsoup.parsers — PDB and mmCIF parsers that fill a structure store.

Architecture:
    - fields.py: fixed-column slicing (PDB) and token splitting (mmCIF)
    - residue_numbering.py: residue numbers for mmCIF atoms without one
    - secondary.py: helix/sheet ranges painted onto residues
    - base.py: StructureParser, the shape both formats share
    - pdb_format.py: PdbParser (models, NMR ensembles, TITLE records)
    - mmcif.py: CifParser (_atom_site, _struct_conf, _struct_sheet_range)
    - dataset.py: format selection, file reading, ParseReport

Usage::

    from molsoup.store import Soup
    from molsoup.parsers import PdbParser, load_structure

    soup = Soup()
    parser = PdbParser(soup)
    parser.parse(text, "1abc")
    print(parser.error, parser.has_secondary_structure)

    # Auto-detect format from the file name
    report = load_structure("1abc.cif.gz", store=soup)
"""

from molsoup.parsers.base import NO_ATOM_LINES, StructureFormat, StructureParser
from molsoup.parsers.dataset import (
    ParseReport,
    auto_parser,
    iter_structure_files,
    load_structure,
    parse_text,
    register_parser,
    sniff_format,
)
from molsoup.parsers.fields import ParsedAtom
from molsoup.parsers.mmcif import CifParser
from molsoup.parsers.pdb_format import PdbParser
from molsoup.parsers.residue_numbering import ResidueNumbering, resolve_residue_number
from molsoup.parsers.secondary import SecondaryStructureRange, apply_range

__all__ = [
    "StructureParser",
    "StructureFormat",
    "NO_ATOM_LINES",
    "PdbParser",
    "CifParser",
    "ParsedAtom",
    "ResidueNumbering",
    "resolve_residue_number",
    "SecondaryStructureRange",
    "apply_range",
    "ParseReport",
    "auto_parser",
    "register_parser",
    "sniff_format",
    "parse_text",
    "load_structure",
    "iter_structure_files",
]
