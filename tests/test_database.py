"""Tests for the compatibility database."""

import json
import threading
from datetime import datetime

import pytest

from padcompat.core.models import CompatibilityRecord, CompatibilitySource, SupportLevel
from padcompat.storage.database import (
    CompatibilityDatabase,
    create_compatibility_database,
    derive_game_key,
    normalize_game_name,
    record_from_dict,
    record_to_dict,
)


@pytest.fixture
def database(config):
    """Create a database stored in the temporary config directory."""
    return CompatibilityDatabase(config=config)


class TestGameKeys:
    """Tests for key derivation and name normalization."""

    def test_key_from_origin_id(self, make_entry) -> None:
        """Test entries with an origin id are keyed by source and id."""
        entry = make_entry("Rocket Rally", game_id="1001", source="Steam")
        assert derive_game_key(entry) == "steam_1001"

    def test_key_without_source(self, make_entry) -> None:
        """Test a missing source leaves an empty prefix."""
        entry = make_entry("Rocket Rally", game_id="ABC")
        assert derive_game_key(entry) == "_abc"

    def test_key_from_name(self, make_entry) -> None:
        """Test entries without an origin id are keyed by name."""
        entry = make_entry("Half-Life 2")
        assert derive_game_key(entry) == "half-life_2"

    def test_normalize_game_name(self) -> None:
        """Test punctuation and case are ignored when matching names."""
        assert normalize_game_name("Half-Life 2") == normalize_game_name("half life 2")
        assert normalize_game_name("  Rocket:  Rally!! ") == "rocket rally"


class TestRecordCodec:
    """Tests for the persisted record format."""

    def test_field_names(self) -> None:
        """Test records are written with camelCase field names."""
        record = CompatibilityRecord(
            game_id="g1",
            game_name="Rocket Rally",
            support_level=SupportLevel.FULL,
            source=CompatibilitySource.USER,
            last_updated=datetime(2024, 2, 3, 4, 5, 6),
        )

        data = record_to_dict(record)

        assert data["gameId"] == "g1"
        assert data["supportLevel"] == "Full"
        assert data["source"] == "User"
        assert data["lastUpdated"] == "2024-02-03T04:05:06"
        assert data["communityRating"] == 0

    def test_legacy_ordinal_levels(self) -> None:
        """Test integer enum values from older databases are accepted."""
        record = record_from_dict({
            "gameId": "g1",
            "gameName": "Rocket Rally",
            "supportLevel": 3,
            "source": 4,
        })

        assert record.support_level == SupportLevel.FULL
        assert record.source == CompatibilitySource.AUTO_DETECTED

    def test_invalid_level(self) -> None:
        """Test unknown level strings are rejected."""
        with pytest.raises(ValueError):
            record_from_dict({"gameId": "g1", "gameName": "x", "supportLevel": "Maybe"})

    def test_out_of_range_ordinal(self) -> None:
        """Test integer levels outside the enum are rejected."""
        with pytest.raises(ValueError):
            record_from_dict({"gameId": "g1", "gameName": "x", "supportLevel": -1})
        with pytest.raises(ValueError):
            record_from_dict({"gameId": "g1", "gameName": "x", "supportLevel": 5})


class TestCompatibilityDatabase:
    """Tests for CompatibilityDatabase."""

    def test_missing_file_is_empty(self, database) -> None:
        """Test a database without a file starts empty."""
        assert database.count == 0
        assert database.get_all() == []

    def test_update_persists(self, database, config, make_entry) -> None:
        """Test update writes the whole map to disk."""
        entry = make_entry("Rocket Rally", game_id="1001", source="Steam")

        record = database.update(entry, SupportLevel.FULL, CompatibilitySource.USER, "Great")

        assert record.support_level == SupportLevel.FULL
        assert record.notes == "Great"
        data = json.loads(config.database_path.read_text(encoding="utf-8"))
        assert data["steam_1001"]["supportLevel"] == "Full"
        assert data["steam_1001"]["source"] == "User"
        assert not config.database_path.with_name(config.database_path.name + ".tmp").exists()

    def test_round_trip(self, database, config, make_entry) -> None:
        """Test records survive a save and reload."""
        entry = make_entry("Rocket Rally", game_id="1001", source="Steam")
        stored = database.update(entry, SupportLevel.PARTIAL, CompatibilitySource.OFFICIAL)

        reloaded = CompatibilityDatabase(config=config).get(entry)

        assert reloaded.game_id == stored.game_id
        assert reloaded.game_name == stored.game_name
        assert reloaded.support_level == SupportLevel.PARTIAL
        assert reloaded.source == CompatibilitySource.OFFICIAL
        assert reloaded.last_updated.replace(microsecond=0) == stored.last_updated.replace(
            microsecond=0
        )

    def test_update_auto_detects(self, database, strategy_entry) -> None:
        """Test update without a level classifies the entry."""
        record = database.update(strategy_entry)

        assert record.support_level == SupportLevel.PARTIAL
        assert record.source == CompatibilitySource.AUTO_DETECTED

    def test_update_is_idempotent(self, database, make_entry) -> None:
        """Test repeated updates replace the same record."""
        entry = make_entry("Rocket Rally")

        first = database.update(entry, SupportLevel.FULL)
        second = database.update(entry, SupportLevel.FULL)

        assert database.count == 1
        assert first.support_level == second.support_level
        assert first.source == second.source
        assert first.game_name == second.game_name

    def test_update_replaces_record(self, database, make_entry) -> None:
        """Test an update fully replaces notes from an earlier write."""
        entry = make_entry("Rocket Rally")

        database.update(entry, SupportLevel.FULL, notes="first")
        record = database.update(entry, SupportLevel.NONE)

        assert record.notes is None
        assert database.get(entry).support_level == SupportLevel.NONE

    def test_name_fallback(self, database, make_entry) -> None:
        """Test lookups fall back to exact then partial name matches."""
        database.update(make_entry("Half-Life 2"), SupportLevel.FULL)

        exact = database.get(make_entry("half life 2", entry_id="other"))
        partial = database.get(make_entry("Half-Life 2: Episode One"))

        assert exact.support_level == SupportLevel.FULL
        assert partial.support_level == SupportLevel.FULL

    def test_unknown_lookup_not_persisted(self, database, config, make_entry) -> None:
        """Test a lookup miss returns a transient record without storing it."""
        database.update(make_entry("Half-Life 2"), SupportLevel.FULL)
        before = config.database_path.read_text(encoding="utf-8")

        portal = make_entry("Portal")
        record = database.get(portal)

        assert record.support_level == SupportLevel.UNKNOWN
        assert record.game_name == "Portal"
        assert not database.contains(portal)
        assert database.count == 1
        assert config.database_path.read_text(encoding="utf-8") == before

    def test_malformed_file(self, config, caplog) -> None:
        """Test a corrupt database file loads as empty."""
        config.ensure_directories()
        config.database_path.write_text("{not json", encoding="utf-8")

        database = CompatibilityDatabase(config=config)

        assert database.count == 0
        assert "Error loading compatibility database" in caplog.text

    def test_malformed_record_skipped(self, config) -> None:
        """Test individual bad records are skipped."""
        config.ensure_directories()
        config.database_path.write_text(
            json.dumps({
                "good": {"gameId": "g1", "gameName": "Rocket Rally", "supportLevel": "Full"},
                "bad": {"gameId": "g2", "gameName": "x", "supportLevel": "Sometimes"},
                "negative": {"gameId": "g3", "gameName": "y", "supportLevel": -1},
            }),
            encoding="utf-8",
        )

        database = CompatibilityDatabase(config=config)

        assert database.count == 1
        assert database.get_all()[0].game_name == "Rocket Rally"

    def test_save_failure_keeps_memory(self, config, make_entry, tmp_path) -> None:
        """Test a failed write leaves the in-memory record updated."""
        blocked = tmp_path / "blocked.json"
        blocked.mkdir()
        database = CompatibilityDatabase(config=config, database_path=blocked)
        entry = make_entry("Rocket Rally")

        record = database.update(entry, SupportLevel.FULL)

        assert record.support_level == SupportLevel.FULL
        assert database.save() is False
        assert database.get(entry).support_level == SupportLevel.FULL

    def test_get_by_support_level(self, database, sample_entries) -> None:
        """Test filtering stored records by level."""
        database.update(sample_entries[0], SupportLevel.FULL)
        database.update(sample_entries[1], SupportLevel.NONE)
        database.update(sample_entries[2], SupportLevel.FULL)

        full = database.get_by_support_level(SupportLevel.FULL)

        assert {r.game_name for r in full} == {"Rocket Rally", "Quiet Meadow"}
        assert database.get_by_support_level(SupportLevel.COMMUNITY) == []

    def test_snapshots_are_copies(self, database, make_entry) -> None:
        """Test mutating returned records leaves the store unchanged."""
        entry = make_entry("Rocket Rally")
        database.update(entry, SupportLevel.FULL, CompatibilitySource.USER)

        records = database.get_all()
        records[0].support_level = SupportLevel.NONE
        records[0].recommended_configurations.append("Gamepad")
        records.clear()
        database.get(entry).notes = "changed"
        database.get_by_support_level(SupportLevel.FULL)[0].source = CompatibilitySource.UNKNOWN

        stored = database.get(entry)
        assert database.count == 1
        assert stored.support_level == SupportLevel.FULL
        assert stored.source == CompatibilitySource.USER
        assert stored.notes is None
        assert stored.recommended_configurations == []

    def test_concurrent_updates(self, database, make_entry) -> None:
        """Test concurrent updates of different games are all kept."""
        entries = [make_entry(f"Game {i}") for i in range(20)]
        threads = [
            threading.Thread(target=database.update, args=(entry, SupportLevel.FULL))
            for entry in entries
        ]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert database.count == 20

    def test_factory(self, config) -> None:
        """Test the factory uses the configured path."""
        database = create_compatibility_database(config)
        assert database.database_path == config.database_path
