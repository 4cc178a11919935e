from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parents[1] / ".env"
if _env_path.is_file():
    load_dotenv(_env_path, override=False)


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(v.strip() for v in value.split(",") if v.strip())


@dataclass
class MolsoupSettings:
    """Configuration loaded from MOLSOUP_* environment variables.

    Parsing behaviour:
      MOLSOUP_LOG_LEVEL=INFO
      MOLSOUP_WATER_RESIDUES=HOH

    File selection:
      MOLSOUP_SCAN_PATTERN=*
      MOLSOUP_PDB_EXTENSIONS=.pdb,.pdb1,.ent,.ent.gz,.pdb.gz
      MOLSOUP_CIF_EXTENSIONS=.cif,.cif.gz,.mmcif
    """

    log_level: str = "INFO"

    # Residue types that always open a new residue in mmCIF numbering
    water_residues: tuple[str, ...] = ("HOH",)

    scan_pattern: str = "*"
    pdb_extensions: tuple[str, ...] = field(
        default_factory=lambda: (".pdb", ".pdb1", ".ent", ".ent.gz", ".pdb.gz")
    )
    cif_extensions: tuple[str, ...] = field(
        default_factory=lambda: (".cif", ".cif.gz", ".mmcif")
    )


def load_settings() -> MolsoupSettings:
    """Load settings from environment variables."""
    defaults = MolsoupSettings()
    return MolsoupSettings(
        log_level=os.environ.get("MOLSOUP_LOG_LEVEL", defaults.log_level).upper(),
        water_residues=_split_list(os.environ.get("MOLSOUP_WATER_RESIDUES", "HOH")) or defaults.water_residues,
        scan_pattern=os.environ.get("MOLSOUP_SCAN_PATTERN", defaults.scan_pattern),
        pdb_extensions=_split_list(os.environ.get("MOLSOUP_PDB_EXTENSIONS", ""))
        or defaults.pdb_extensions,
        cif_extensions=_split_list(os.environ.get("MOLSOUP_CIF_EXTENSIONS", ""))
        or defaults.cif_extensions,
    )
