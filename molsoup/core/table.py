from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from molsoup.store.soup import Soup

COLUMNS = [
    "structure_id",
    "title",
    "chain_count",
    "residue_count",
    "atom_count",
    "helix_residue_count",
    "sheet_residue_count",
]


@dataclass(frozen=True)
class StructureTable:
    """Per-structure summary table.

    Convention:
      - one row per parsed structure (one per model for multi-model files)
      - `source` is the file the structure was read from, when known
    """

    df: pd.DataFrame

    @staticmethod
    def from_soup(soup: Soup, source: Optional[str] = None) -> "StructureTable":
        rows = [soup.summary(i) for i in range(len(soup.structures))]
        df = pd.DataFrame(rows, columns=COLUMNS)
        if source is not None:
            df["source"] = source
        return StructureTable(df)

    @staticmethod
    def concat(tables: Iterable["StructureTable"]) -> "StructureTable":
        frames = [t.df for t in tables]
        if not frames:
            return StructureTable(pd.DataFrame(columns=COLUMNS))
        return StructureTable(pd.concat(frames, ignore_index=True))

    def save_parquet(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.df.to_parquet(path, index=False)

    @staticmethod
    def load_parquet(path: Path) -> "StructureTable":
        return StructureTable(pd.read_parquet(path))

    def count(self) -> int:
        return int(len(self.df))

    def atom_total(self) -> int:
        if "atom_count" not in self.df.columns:
            return 0
        return int(self.df["atom_count"].fillna(0).sum())
