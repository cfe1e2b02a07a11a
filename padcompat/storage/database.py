"""Compatibility Database - durable store of per-game compatibility records.

Records are keyed by a stable game key derived from the catalog entry and
persisted as a single indented JSON file. Lookups that miss the key fall
back to matching by game name. Unknown games are classified on demand.
"""

import json
import logging
import os
import re
import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from padcompat.classification.engine import CompatibilityClassifier
from padcompat.core.config import Config, get_default_config
from padcompat.core.logging_config import log_database_write
from padcompat.core.models import (
    CatalogEntry,
    CompatibilityRecord,
    CompatibilitySource,
    SupportLevel,
)

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def derive_game_key(entry: CatalogEntry) -> str:
    """Derive the database key for a catalog entry.

    Entries with an origin-specific id are keyed by "<source>_<game_id>";
    other entries by their name with spaces replaced by underscores.
    Keys are lowercase.
    """
    if entry.game_id:
        return f"{entry.source or ''}_{entry.game_id}".lower()
    return (entry.name or "").lower().replace(" ", "_")


def normalize_game_name(name: str) -> str:
    """Normalize a game name for fallback matching.

    Lowercases and collapses punctuation and whitespace runs to single
    spaces, so "Half-Life 2" and "half life 2" compare equal.
    """
    return _NON_ALNUM.sub(" ", (name or "").lower()).strip()


def record_to_dict(record: CompatibilityRecord) -> dict[str, Any]:
    """Serialize a record using the persisted field names."""
    return {
        "gameId": record.game_id,
        "gameName": record.game_name,
        "supportLevel": record.support_level.value,
        "notes": record.notes,
        "source": record.source.value,
        "lastUpdated": record.last_updated.isoformat(),
        "recommendedConfigurations": list(record.recommended_configurations),
        "communityRating": record.community_rating,
        "totalRatings": record.total_ratings,
    }


def _parse_enum(enum_cls: type, value: Any) -> Any:
    """Parse an enum from its value, member name or ordinal position."""
    if isinstance(value, int) and not isinstance(value, bool):
        members = list(enum_cls)
        if not 0 <= value < len(members):
            raise ValueError(f"Invalid {enum_cls.__name__} ordinal: {value}")
        return members[value]
    for member in enum_cls:
        if value in (member.value, member.name):
            return member
    raise ValueError(f"Invalid {enum_cls.__name__}: {value!r}")


def record_from_dict(data: dict[str, Any]) -> CompatibilityRecord:
    """Parse a record from its persisted form.

    Raises:
        ValueError, KeyError, TypeError: If the data is malformed.
    """
    last_updated = data.get("lastUpdated")

    return CompatibilityRecord(
        game_id=str(data.get("gameId") or ""),
        game_name=str(data.get("gameName") or ""),
        support_level=_parse_enum(SupportLevel, data.get("supportLevel", "Unknown")),
        notes=data.get("notes"),
        source=_parse_enum(CompatibilitySource, data.get("source", "Unknown")),
        last_updated=datetime.fromisoformat(last_updated) if last_updated else datetime.now(),
        recommended_configurations=list(data.get("recommendedConfigurations") or []),
        community_rating=int(data.get("communityRating") or 0),
        total_ratings=int(data.get("totalRatings") or 0),
    )


def _copy_record(record: CompatibilityRecord) -> CompatibilityRecord:
    """Copy a record so callers cannot mutate the stored one."""
    return replace(record, recommended_configurations=list(record.recommended_configurations))


class CompatibilityDatabase:
    """Durable mapping from game key to compatibility record.

    All reads and writes of the in-memory map, as well as load and save,
    are serialized by a single lock. Persistence failures are logged and
    never raised.

    Example:
        db = CompatibilityDatabase(config)
        record = db.get(entry)
        if record.support_level == SupportLevel.UNKNOWN:
            record = db.update(entry)  # auto-detect and store
    """

    def __init__(
        self,
        config: Config | None = None,
        database_path: Path | None = None,
        classifier: CompatibilityClassifier | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the database and load it from disk.

        Args:
            config: Configuration object
            database_path: Override path of the database file
            classifier: Classifier used for auto-detection
            logger: Logger to report to
        """
        self.config = config or get_default_config()
        self.database_path = database_path or self.config.database_path
        self.logger = logger or logging.getLogger("padcompat.storage.database")
        self.classifier = classifier or CompatibilityClassifier(logger=self.logger)

        self._records: dict[str, CompatibilityRecord] = {}
        self._lock = threading.RLock()

        self.load()

    def load(self) -> None:
        """Load the database from disk.

        A missing file yields an empty database. An unreadable or malformed
        file is logged and also yields an empty database. Individual
        malformed records are skipped.
        """
        with self._lock:
            if not self.database_path.exists():
                self._records = {}
                return

            try:
                with open(self.database_path, encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("Database root must be a JSON object")
            except Exception as e:
                self.logger.error(f"Error loading compatibility database: {e}")
                self._records = {}
                return

            records: dict[str, CompatibilityRecord] = {}
            for key, record_data in data.items():
                try:
                    records[key] = record_from_dict(record_data)
                except Exception as e:
                    self.logger.warning(f"Skipping malformed record {key!r}: {e}")

            self._records = records
            self.logger.info(f"Loaded {len(records)} compatibility records from {self.database_path}")

    def save(self) -> bool:
        """Save the whole database to disk.

        Writes to a temporary file and renames it over the database file.

        Returns:
            True if the database was written, False on failure.
        """
        with self._lock:
            data = {key: record_to_dict(record) for key, record in self._records.items()}
            temp_path = self.database_path.with_name(self.database_path.name + ".tmp")

            try:
                self.database_path.parent.mkdir(parents=True, exist_ok=True)
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(temp_path, self.database_path)
            except Exception as e:
                self.logger.error(f"Error saving compatibility database: {e}")
                return False

            return True

    def get(self, entry: CatalogEntry) -> CompatibilityRecord:
        """Get the compatibility record for an entry.

        Falls back to a name match when the key is not stored. If nothing
        matches, returns a transient UNKNOWN record that is not stored.

        Args:
            entry: Catalog entry to look up.

        Returns:
            Stored or transient CompatibilityRecord.
        """
        key = derive_game_key(entry)

        with self._lock:
            record = self._records.get(key)
            if record is None:
                record = self._find_by_name(entry.name)
            if record is not None:
                return _copy_record(record)

        return CompatibilityRecord(
            game_id=entry.id,
            game_name=entry.name,
            support_level=SupportLevel.UNKNOWN,
            source=CompatibilitySource.UNKNOWN,
            last_updated=datetime.now(),
        )

    def _find_by_name(self, name: str) -> CompatibilityRecord | None:
        """Find a record by exact, then partial, name match.

        The first match in storage order wins. Substring matching can pick
        up unrelated titles that share a short common part.
        """
        target = normalize_game_name(name)
        if not target:
            return None

        candidates = [
            (normalize_game_name(r.game_name), r) for r in self._records.values() if r.game_name
        ]

        for stored_name, record in candidates:
            if stored_name == target:
                return record

        for stored_name, record in candidates:
            if stored_name and (target in stored_name or stored_name in target):
                return record

        return None

    def update(
        self,
        entry: CatalogEntry,
        support_level: SupportLevel | None = None,
        source: CompatibilitySource = CompatibilitySource.USER,
        notes: str | None = None,
    ) -> CompatibilityRecord:
        """Store a compatibility level for an entry and persist the database.

        Without a support level the entry is classified and stored with
        source AUTO_DETECTED. The stored record is fully replaced. The
        in-memory record stays updated even if saving fails.

        Args:
            entry: Catalog entry to update.
            support_level: Level to store, or None to auto-detect.
            source: Provenance of the level (ignored when auto-detecting).
            notes: Optional notes.

        Returns:
            The stored CompatibilityRecord.
        """
        if support_level is None:
            support_level = self.classifier.classify(entry)
            source = CompatibilitySource.AUTO_DETECTED

        key = derive_game_key(entry)
        record = CompatibilityRecord(
            game_id=entry.id,
            game_name=entry.name,
            support_level=support_level,
            notes=notes,
            source=source,
            last_updated=datetime.now(),
        )

        with self._lock:
            self._records[key] = record
            saved = self.save()

        log_database_write(key, support_level.value, source.value, saved)
        return _copy_record(record)

    def get_all(self) -> list[CompatibilityRecord]:
        """Get a snapshot of all stored records."""
        with self._lock:
            return [_copy_record(r) for r in self._records.values()]

    def get_by_support_level(self, support_level: SupportLevel) -> list[CompatibilityRecord]:
        """Get a snapshot of all stored records with a given support level."""
        with self._lock:
            return [
                _copy_record(r) for r in self._records.values()
                if r.support_level == support_level
            ]

    def contains(self, entry: CatalogEntry) -> bool:
        """Check if a record is stored under the entry's key."""
        with self._lock:
            return derive_game_key(entry) in self._records

    @property
    def count(self) -> int:
        """Get the number of stored records."""
        with self._lock:
            return len(self._records)


def create_compatibility_database(
    config: Config | None = None,
    classifier: CompatibilityClassifier | None = None,
) -> CompatibilityDatabase:
    """Create a compatibility database with default or provided configuration.

    Args:
        config: Optional configuration object
        classifier: Optional classifier for auto-detection

    Returns:
        CompatibilityDatabase instance
    """
    return CompatibilityDatabase(config=config, classifier=classifier)
