"""Tests for StructureTable."""

from pathlib import Path

from molsoup.core.table import COLUMNS, StructureTable
from molsoup.parsers.dataset import parse_text
from molsoup.store import Soup
from structure_text import helix_line, residue_block

TEXT = "\n".join(
    ["TITLE     TWO MODELS", helix_line(1, "A", 1, 2)]
    + residue_block("A", 1, 3) + ["END"]
    + residue_block("A", 1, 3) + ["END"]
)


def _table() -> StructureTable:
    soup = Soup()
    parse_text(TEXT, "2mod", store=soup)
    return StructureTable.from_soup(soup, source="2mod.pdb")


def test_from_soup_one_row_per_structure() -> None:
    t = _table()
    assert t.count() == 2
    assert list(t.df.columns) == COLUMNS + ["source"]
    assert list(t.df["structure_id"]) == ["2mod[1]", "2mod[2]"]
    assert list(t.df["helix_residue_count"]) == [2, 2]
    assert t.atom_total() == 12


def test_concat_empty() -> None:
    t = StructureTable.concat([])
    assert t.count() == 0
    assert t.atom_total() == 0


def test_concat() -> None:
    t = StructureTable.concat([_table(), _table()])
    assert t.count() == 4


def test_parquet_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "out" / "table.parquet"
    _table().save_parquet(path)
    loaded = StructureTable.load_parquet(path)
    assert loaded.count() == 2
    assert loaded.df["title"].iloc[0] == "TWO MODELS"
