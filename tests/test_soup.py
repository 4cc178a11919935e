"""Tests for the in-memory structure store."""

import numpy as np
import pytest

from molsoup.store import Soup, StructureStore


def _add(soup, chain, res_num, name="CA", ins_code="", res_type="ALA", x=0.0):
    soup.add_atom(x, 0.0, 0.0, 10.0, "", name, name[0], res_type, res_num, ins_code, chain)


@pytest.fixture
def soup() -> Soup:
    s = Soup()
    s.push_structure_id("1abc", "TEST PROTEIN")
    _add(s, "A", 1, "N", x=1.0)
    _add(s, "A", 1, "CA", x=2.0)
    _add(s, "A", 2, "N", x=3.0)
    _add(s, "A", 2, "N", ins_code="A", x=4.0)
    _add(s, "B", 1, "N", x=5.0)
    return s


class TestSoupBucketing:
    def test_is_structure_store(self, soup: Soup):
        assert isinstance(soup, StructureStore)

    def test_residues_open_on_identity_change(self, soup: Soup):
        assert soup.residue_count == 4
        assert [r.res_id for r in soup.residues] == ["A:1", "A:2", "A:2A", "B:1"]
        assert soup.residues[0].num_atoms == 2

    def test_atom_links_residue(self, soup: Soup):
        assert soup.atom_count == 5
        assert soup.atoms[4].i_res == 3
        assert soup.atoms[1].pos == (2.0, 0.0, 0.0)

    def test_add_atom_requires_structure(self):
        with pytest.raises(RuntimeError):
            _add(Soup(), "A", 1)

    def test_new_structure_opens_new_residue(self, soup: Soup):
        soup.push_structure_id("1abc[2]", "")
        _add(soup, "B", 1)
        assert soup.residue_count == 5
        assert soup.residues[-1].i_structure == 1
        assert soup.residue_range(1) == range(4, 5)
        assert soup.structure_ids == ["1abc", "1abc[2]"]


class TestSoupLookup:
    def test_find_requires_assignment(self, soup: Soup):
        with pytest.raises(KeyError):
            soup.find_residue_indices(0, "A", 1)

    def test_find_residue_indices(self, soup: Soup):
        soup.assign_residue_properties(0)
        assert soup.find_residue_indices(0, "A", 1) == [0]
        assert soup.find_residue_indices(0, "A", 2) == [1, 2]
        assert soup.find_residue_indices(0, "B", 1) == [3]
        assert soup.find_residue_indices(0, "C", 1) == []

    def test_lookup_is_per_structure(self, soup: Soup):
        soup.push_structure_id("other", "")
        _add(soup, "A", 1)
        soup.assign_residue_properties(1)
        assert soup.find_residue_indices(1, "A", 1) == [4]


class TestSoupReadSide:
    def test_chains(self, soup: Soup):
        assert soup.get_chains(0) == ["A", "B"]

    def test_ss_string(self, soup: Soup):
        soup.residues[1].ss = "H"
        assert soup.ss_string(0) == "-H--"

    def test_coords(self, soup: Soup):
        coords = soup.coords(0)
        assert coords.shape == (5, 3)
        assert np.allclose(coords[:, 0], [1.0, 2.0, 3.0, 4.0, 5.0])

    def test_coords_empty(self):
        assert Soup().coords().shape == (0, 3)

    def test_summary(self, soup: Soup):
        soup.residues[0].ss = "E"
        s = soup.summary(0)
        assert s["structure_id"] == "1abc"
        assert s["title"] == "TEST PROTEIN"
        assert s["chain_count"] == 2
        assert s["residue_count"] == 4
        assert s["atom_count"] == 5
        assert s["sheet_residue_count"] == 1
        assert s["helix_residue_count"] == 0

    def test_get_structure(self, soup: Soup):
        soup.push_structure_id("2xyz", "")
        _add(soup, "C", 7)
        entry = soup.get_structure(1)
        assert entry.structure_id == "2xyz"
        assert (entry.residue_start, entry.residue_stop) == (4, 5)
        assert [r.chain for r in soup.get_residues(1)] == ["C"]
        assert soup.coords(1).shape == (1, 3)

    def test_repr(self, soup: Soup):
        assert "residues=4" in repr(soup)
