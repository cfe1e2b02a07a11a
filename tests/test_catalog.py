"""Tests for catalog loading."""

import json

import pytest

from padcompat.core.catalog import CatalogError, find_entry, load_catalog


class TestLoadCatalog:
    """Tests for load_catalog."""

    def test_games_object(self, catalog_file) -> None:
        """Test loading an object with a games list."""
        entries = load_catalog(catalog_file)

        assert [e.name for e in entries] == ["Rocket Rally", "Ledger of Kings", "Quiet Meadow"]
        assert entries[0].genres == ["Racing", "Sports"]

    def test_plain_list(self, tmp_path) -> None:
        """Test loading a bare list of entries."""
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"id": "a", "name": "Rocket Rally"}]), encoding="utf-8")

        entries = load_catalog(path)

        assert len(entries) == 1
        assert entries[0].id == "a"

    def test_bad_entries_skipped(self, tmp_path) -> None:
        """Test entries without id and name are skipped."""
        path = tmp_path / "mixed.json"
        path.write_text(
            json.dumps([{"name": "Rocket Rally"}, {"genres": ["Action"]}, "oops"]),
            encoding="utf-8",
        )

        assert [e.name for e in load_catalog(path)] == ["Rocket Rally"]

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing catalog raises CatalogError."""
        with pytest.raises(CatalogError):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path) -> None:
        """Test a corrupt catalog raises CatalogError."""
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_invalid_root(self, tmp_path) -> None:
        """Test a catalog root that is neither list nor object."""
        path = tmp_path / "number.json"
        path.write_text("42", encoding="utf-8")

        with pytest.raises(CatalogError):
            load_catalog(path)


class TestFindEntry:
    """Tests for find_entry."""

    def test_by_id(self, sample_entries) -> None:
        """Test exact id lookup."""
        assert find_entry(sample_entries, "quiet-meadow").name == "Quiet Meadow"

    def test_by_name(self, sample_entries) -> None:
        """Test case-insensitive name lookup."""
        assert find_entry(sample_entries, "rocket rally").id == "rocket-rally"

    def test_by_id_prefix(self, sample_entries) -> None:
        """Test id prefix lookup."""
        assert find_entry(sample_entries, "ledger").name == "Ledger of Kings"

    def test_not_found(self, sample_entries) -> None:
        """Test unknown queries return None."""
        assert find_entry(sample_entries, "Portal") is None
