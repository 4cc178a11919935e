"""Tests for format selection, file reading and ParseReport."""

import gzip
from pathlib import Path

import pytest

from molsoup.parsers.base import NO_ATOM_LINES, StructureFormat
from molsoup.parsers.dataset import (
    ParseReport,
    auto_parser,
    format_for_path,
    iter_structure_files,
    load_structure,
    parse_text,
    read_text,
    sniff_format,
    structure_id_for_path,
)
from molsoup.parsers.mmcif import CifParser
from molsoup.parsers.pdb_format import PdbParser
from molsoup.store import Soup
from structure_text import CIF_ATOM_SITE_HEADER, atom_line, cif_atom_line, helix_line, residue_block

PDB_TEXT = "\n".join(
    ["TITLE     SMALL PROTEIN", helix_line(1, "A", 1, 2)] + residue_block("A", 1, 3) + ["END"]
) + "\n"

CIF_TEXT = "\n".join([
    "data_1ABC",
    "_struct.title 'Small protein'",
    "#",
    CIF_ATOM_SITE_HEADER,
    cif_atom_line(1, "N", "N", "GLY", "A", "1", "1", "1"),
    cif_atom_line(2, "C", "CA", "GLY", "A", "1", "1", "1"),
    "#",
]) + "\n"


@pytest.fixture
def pdb_file(tmp_path: Path) -> Path:
    p = tmp_path / "1abc.pdb"
    p.write_text(PDB_TEXT)
    return p


@pytest.fixture
def cif_gz_file(tmp_path: Path) -> Path:
    p = tmp_path / "1abc.cif.gz"
    with gzip.open(p, "wt") as f:
        f.write(CIF_TEXT)
    return p


class TestAutoParser:
    def test_pdb_extension(self):
        assert isinstance(auto_parser("1abc.pdb", Soup()), PdbParser)

    def test_pdb1_extension(self):
        assert isinstance(auto_parser("1abc.pdb1", Soup()), PdbParser)

    def test_cif_extension(self):
        assert isinstance(auto_parser("1abc.cif", Soup()), CifParser)

    def test_cif_gz_extension(self):
        assert isinstance(auto_parser("1ABC.CIF.GZ", Soup()), CifParser)

    def test_unknown_extension(self):
        with pytest.raises(ValueError, match="No parser"):
            auto_parser("data.xyz", Soup())

    def test_format_for_path(self):
        assert format_for_path("x.ent.gz") == StructureFormat.PDB
        assert format_for_path("x.mmcif") == StructureFormat.CIF
        assert format_for_path("x.txt") is None


class TestSniffFormat:
    def test_cif(self):
        assert sniff_format(CIF_TEXT) == StructureFormat.CIF

    def test_pdb(self):
        assert sniff_format(PDB_TEXT) == StructureFormat.PDB

    def test_bare_atoms(self):
        assert sniff_format(atom_line(1, "CA", "ALA", "A", 1)) == StructureFormat.PDB

    def test_empty(self):
        assert sniff_format("") == StructureFormat.PDB


class TestReadText:
    def test_plain(self, pdb_file: Path):
        assert read_text(pdb_file) == PDB_TEXT

    def test_gzip(self, cif_gz_file: Path):
        assert read_text(cif_gz_file) == CIF_TEXT

    def test_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_text(tmp_path / "nope.pdb")

    def test_structure_id_for_path(self):
        assert structure_id_for_path("/data/1abc.cif.gz") == "1abc"
        assert structure_id_for_path("1abc.pdb") == "1abc"


class TestParseText:
    def test_pdb_report(self):
        report = parse_text(PDB_TEXT, "1abc")
        assert isinstance(report, ParseReport)
        assert report.format == StructureFormat.PDB
        assert report.structure_ids == ["1abc"]
        assert report.n_atoms == 6
        assert report.n_residues == 3
        assert report.has_secondary_structure
        assert report.ok

    def test_explicit_format(self):
        report = parse_text(CIF_TEXT, "1abc", fmt=StructureFormat.CIF)
        assert report.format == StructureFormat.CIF
        assert report.n_atoms == 2

    def test_filename_selects_parser(self):
        report = parse_text(CIF_TEXT, "1abc", filename="1abc.cif")
        assert report.format == StructureFormat.CIF

    def test_no_atoms(self):
        report = parse_text("HEADER    EMPTY\n", "e")
        assert report.error == NO_ATOM_LINES
        assert report.structure_ids == []
        assert not report.ok

    def test_shared_store(self):
        soup = Soup()
        parse_text(PDB_TEXT, "one", store=soup)
        report = parse_text(PDB_TEXT, "two", store=soup)
        assert soup.structure_ids == ["one", "two"]
        assert report.n_atoms == 6


class TestLoadStructure:
    def test_pdb_file(self, pdb_file: Path):
        soup = Soup()
        report = load_structure(pdb_file, store=soup)
        assert report.structure_ids == ["1abc"]
        assert report.source_path == pdb_file
        assert soup.structures[0].title == "SMALL PROTEIN"
        assert soup.ss_string(0) == "HH-"

    def test_gzip_cif_file(self, cif_gz_file: Path):
        soup = Soup()
        report = load_structure(cif_gz_file, store=soup, structure_id="custom")
        assert report.format == StructureFormat.CIF
        assert soup.structure_ids == ["custom"]
        assert soup.structures[0].title == "Small protein"

    def test_unknown_extension_sniffed(self, tmp_path: Path):
        p = tmp_path / "structure.txt"
        p.write_text(CIF_TEXT)
        report = load_structure(p)
        assert report.format == StructureFormat.CIF

    def test_upper_case_gzip_suffix(self, tmp_path: Path):
        p = tmp_path / "1ABC.CIF.GZ"
        with gzip.open(p, "wt") as f:
            f.write(CIF_TEXT)
        assert list(iter_structure_files(tmp_path)) == [p]
        report = load_structure(p)
        assert report.format == StructureFormat.CIF
        assert report.structure_ids == ["1ABC"]
        assert report.n_atoms == 2
        assert report.error == ""

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_structure(tmp_path / "missing.pdb")

    def test_iter_structure_files(self, tmp_path: Path, pdb_file: Path, cif_gz_file: Path):
        (tmp_path / "notes.txt").write_text("x")
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "2xyz.pdb1").write_text(PDB_TEXT)
        found = [p.name for p in iter_structure_files(tmp_path)]
        assert sorted(found) == ["1abc.cif.gz", "1abc.pdb", "2xyz.pdb1"]

    def test_iter_structure_files_pattern(self, tmp_path: Path, pdb_file: Path, cif_gz_file: Path):
        found = [p.name for p in iter_structure_files(tmp_path, pattern="*.pdb")]
        assert found == ["1abc.pdb"]
