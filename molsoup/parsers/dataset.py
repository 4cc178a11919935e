"""Load structure files into a store.

Picks the parser for a file by extension, or by sniffing the text when
the name gives nothing away, reads plain or gzipped text, and reports
what the parse produced.

Usage::

    from molsoup.parsers import load_structure

    report = load_structure("1abc.cif.gz")
    print(report.structure_ids, report.error, report.has_secondary_structure)
"""

from __future__ import annotations

import gzip
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from molsoup.config import MolsoupSettings, load_settings
from molsoup.core.logging_utils import get_logger
from molsoup.parsers.base import StructureFormat, StructureParser
from molsoup.parsers.secondary import UnmatchedCallback
from molsoup.store.base import StructureStore
from molsoup.store.soup import Soup

logger = get_logger(__name__)

# ======================================================================
# Parser registry
# ======================================================================

_REGISTRY: dict[str, type[StructureParser]] = {}
_FORMATS: dict[StructureFormat, type[StructureParser]] = {}


def register_parser(parser_cls: type[StructureParser]) -> None:
    """Register a parser class for its format and declared extensions."""
    _FORMATS[parser_cls.format] = parser_cls
    for ext in parser_cls.extensions():
        _REGISTRY[ext.lower()] = parser_cls


def _ensure_registry() -> None:
    if _REGISTRY:
        return
    from molsoup.parsers.mmcif import CifParser
    from molsoup.parsers.pdb_format import PdbParser
    register_parser(CifParser)
    register_parser(PdbParser)


def format_for_path(path: str | Path) -> Optional[StructureFormat]:
    _ensure_registry()
    name = str(path).lower()
    for ext in sorted(_REGISTRY, key=len, reverse=True):
        if name.endswith(ext):
            return _REGISTRY[ext].format
    return None


def sniff_format(text: str) -> StructureFormat:
    """Guess the format from content: mmCIF has data blocks and ``_`` tags."""
    for line in text.splitlines():
        if not line.strip():
            continue
        if line.startswith("data_") or line.startswith("loop_") or line.startswith("_"):
            return StructureFormat.CIF
        # mmCIF atom rows always follow an _atom_site header
        if line.startswith("ATOM") or line.startswith("HETATM"):
            return StructureFormat.PDB
    return StructureFormat.PDB


def auto_parser(
    path: str | Path,
    store: StructureStore,
    settings: Optional[MolsoupSettings] = None,
    on_unmatched: Optional[UnmatchedCallback] = None,
) -> StructureParser:
    """Return the appropriate parser for a file path based on extension."""
    fmt = format_for_path(path)
    if fmt is None:
        available = sorted(set(_REGISTRY.keys()))
        raise ValueError(f"No parser for '{path}'. Supported: {available}")
    return parser_for_format(fmt, store, settings=settings, on_unmatched=on_unmatched)


def parser_for_format(
    fmt: StructureFormat,
    store: StructureStore,
    settings: Optional[MolsoupSettings] = None,
    on_unmatched: Optional[UnmatchedCallback] = None,
) -> StructureParser:
    _ensure_registry()
    return _FORMATS[StructureFormat(fmt)](store, settings=settings, on_unmatched=on_unmatched)


# ======================================================================
# Reading and parsing
# ======================================================================

def read_text(path: str | Path) -> str:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Structure file not found: {path}")
    gz = path.suffix.lower() == ".gz"
    opener = gzip.open if gz else open
    mode = "rt" if gz else "r"
    with opener(path, mode, encoding="utf-8", errors="ignore", newline="") as f:
        return f.read()


def structure_id_for_path(path: str | Path) -> str:
    """File name without compression and format extensions."""
    name = Path(path).name
    if name.lower().endswith(".gz"):
        name = name[:-3]
    return Path(name).stem


@dataclass
class ParseReport:
    """What one parse call left in the store."""

    format: StructureFormat
    structure_ids: list[str] = field(default_factory=list)
    error: str = ""
    errors: list[str] = field(default_factory=list)
    has_secondary_structure: bool = False
    n_atoms: int = 0
    n_residues: int = 0
    source_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return bool(self.structure_ids) and not self.errors


def parse_text(
    text: str,
    structure_id: str,
    store: Optional[StructureStore] = None,
    fmt: Optional[StructureFormat] = None,
    filename: Optional[str | Path] = None,
    settings: Optional[MolsoupSettings] = None,
    on_unmatched: Optional[UnmatchedCallback] = None,
) -> ParseReport:
    """Parse text already in memory into ``store`` (a new Soup by default)."""
    store = store if store is not None else Soup()
    if fmt is None and filename is not None:
        fmt = format_for_path(filename)
    if fmt is None:
        fmt = sniff_format(text)
    parser = parser_for_format(fmt, store, settings=settings, on_unmatched=on_unmatched)

    n_atoms_before = len(getattr(store, "atoms", ()))
    n_residues_before = len(store.residues)
    parser.parse(text, structure_id)

    return ParseReport(
        format=parser.format,
        structure_ids=list(parser.structure_ids),
        error=parser.error,
        errors=list(parser.errors),
        has_secondary_structure=parser.has_secondary_structure,
        n_atoms=len(getattr(store, "atoms", ())) - n_atoms_before,
        n_residues=len(store.residues) - n_residues_before,
        source_path=Path(filename) if filename is not None else None,
    )


def load_structure(
    path: str | Path,
    store: Optional[StructureStore] = None,
    structure_id: Optional[str] = None,
    settings: Optional[MolsoupSettings] = None,
    on_unmatched: Optional[UnmatchedCallback] = None,
) -> ParseReport:
    """Read a structure file and parse it into ``store``."""
    path = Path(path)
    text = read_text(path)
    report = parse_text(
        text,
        structure_id or structure_id_for_path(path),
        store=store,
        filename=path,
        settings=settings,
        on_unmatched=on_unmatched,
    )
    if report.error:
        logger.warning("Parsed %s with errors (last: %s)", path, report.error)
    else:
        logger.info("Parsed %s: structures=%d atoms=%d", path, len(report.structure_ids), report.n_atoms)
    return report


def iter_structure_files(
    directory: str | Path,
    pattern: Optional[str] = None,
    settings: Optional[MolsoupSettings] = None,
) -> Iterator[Path]:
    """Files under ``directory`` matching ``pattern`` that a parser accepts."""
    settings = settings or load_settings()
    d = Path(directory)
    paths = sorted(p for p in d.rglob(pattern or settings.scan_pattern) if p.is_file())
    for p in paths:
        if format_for_path(p) is not None:
            yield p
