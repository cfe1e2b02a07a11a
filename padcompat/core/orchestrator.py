"""Compatibility Orchestrator - resolves compatibility for library entries.

The orchestrator is responsible for:
- Honouring the ignore list and manual overrides
- Reading stored compatibility records
- Auto-detecting and storing compatibility for unknown games
- Running detection over a whole catalog with progress feedback
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from padcompat.classification.engine import CompatibilityClassifier
from padcompat.storage.database import CompatibilityDatabase
from padcompat.storage.overrides import UNKNOWN_LABEL, OverrideStore, parse_support_label

from .config import Config
from .logging_config import get_logger
from .models import CatalogEntry, CompatibilitySource, SupportLevel

# Type alias for progress callback
ProgressCallback = Callable[[str, int, int], None]


@dataclass
class DetectionRunResult:
    """Result of running detection over a set of catalog entries.

    Attributes:
        levels: Resolved support level per entry id
        skipped: IDs of ignored entries
        run_time_ms: Total run duration in milliseconds
        started_at: Run start timestamp
        completed_at: Run completion timestamp
        errors: Any errors encountered during the run
    """

    levels: dict[str, SupportLevel] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    run_time_ms: float = 0.0
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        """Get number of entries with a resolved level."""
        return len(self.levels)

    def get_summary(self) -> dict[str, int]:
        """Get count summary by support level."""
        summary: dict[str, int] = {}
        for level in self.levels.values():
            summary[level.value] = summary.get(level.value, 0) + 1
        return summary


class CompatibilityOrchestrator:
    """Resolve controller compatibility for catalog entries.

    Resolution order: ignore list, manual override, stored record,
    auto-detection.

    Example:
        orchestrator = CompatibilityOrchestrator(config)
        level = orchestrator.get_compatibility(entry)

        result = orchestrator.auto_detect(entries)
        print(result.get_summary())
    """

    def __init__(
        self,
        config: Config,
        database: CompatibilityDatabase | None = None,
        classifier: CompatibilityClassifier | None = None,
        overrides: OverrideStore | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Application configuration.
            database: Compatibility database (created from config if None).
            classifier: Classifier for auto-detection.
            overrides: Manual override store (created from config if None).
        """
        self.config = config
        self.logger = get_logger("main")
        self.classifier = classifier or CompatibilityClassifier(logger=self.logger)
        self.database = database or CompatibilityDatabase(
            config=config,
            classifier=self.classifier,
            logger=self.logger,
        )
        self.overrides = overrides or OverrideStore(config=config)

    def is_ignored(self, entry: CatalogEntry) -> bool:
        """Check if an entry is on the configured ignore list."""
        return self.config.is_ignored(entry.id, entry.name)

    def get_compatibility(self, entry: CatalogEntry) -> SupportLevel:
        """Resolve the support level of an entry.

        Args:
            entry: Catalog entry to resolve.

        Returns:
            The resolved SupportLevel; UNKNOWN when nothing is known and
            auto-detection is disabled or fails.
        """
        if self.is_ignored(entry):
            return SupportLevel.UNKNOWN

        label = self.overrides.get(entry.id)
        if label is not None and label != UNKNOWN_LABEL:
            self.logger.debug(f"Manual override for {entry.name}: {label}")
            return parse_support_label(label)

        record = self.database.get(entry)
        if record.support_level != SupportLevel.UNKNOWN:
            return record.support_level

        if not self.config.detection.auto_detect_compatibility:
            return SupportLevel.UNKNOWN

        try:
            return self.database.update(entry).support_level
        except Exception as e:
            self.logger.error(f"Auto-detection failed for {entry.name}: {e}")
            return SupportLevel.UNKNOWN

    def set_manual_compatibility(self, entries: list[CatalogEntry], label: str) -> int:
        """Record a manual compatibility label for entries.

        Args:
            entries: Entries to label.
            label: Raw label, e.g. "Full", "Partial", "None" or "Unknown".

        Returns:
            Number of entries labelled.
        """
        count = 0
        for entry in entries:
            self.overrides.set(entry.id, label)
            count += 1
            self.logger.info(f"Set manual compatibility: {entry.name} -> {label}")

        if count:
            self.overrides.save()
        return count

    def apply_overrides(self, entries: list[CatalogEntry]) -> int:
        """Copy manual overrides of known entries into the database.

        Args:
            entries: Catalog entries the override ids are resolved against.

        Returns:
            Number of records written.
        """
        by_id = {entry.id: entry for entry in entries}
        applied = 0

        for entry_id, label in self.overrides.items():
            entry = by_id.get(entry_id)
            if entry is None:
                continue
            self.database.update(entry, parse_support_label(label), CompatibilitySource.USER)
            applied += 1

        self.logger.info(f"Applied {applied} manual overrides to the database")
        return applied

    def auto_detect(
        self,
        entries: list[CatalogEntry],
        force: bool = False,
        progress_callback: ProgressCallback | None = None,
    ) -> DetectionRunResult:
        """Run detection over catalog entries.

        Args:
            entries: Entries to process.
            force: Re-classify even when an override or record exists.
            progress_callback: Optional callback for progress updates.
                             Called with (game_name, current, total).

        Returns:
            DetectionRunResult with the resolved levels.
        """
        result = DetectionRunResult(started_at=datetime.now())
        start_time = time.perf_counter()
        total = len(entries)

        self.logger.info(f"Starting detection for {total} games")

        for idx, entry in enumerate(entries):
            if progress_callback:
                progress_callback(entry.name, idx + 1, total)

            if self.is_ignored(entry):
                result.skipped.append(entry.id)
                continue

            try:
                if force:
                    level = self.database.update(entry).support_level
                else:
                    level = self.get_compatibility(entry)
                result.levels[entry.id] = level
            except Exception as e:
                self.logger.exception(f"Unexpected error detecting {entry.name}")
                result.errors.append(f"{entry.name}: {e}")

        self.config.detection.auto_detection_completed = True

        result.run_time_ms = (time.perf_counter() - start_time) * 1000
        result.completed_at = datetime.now()

        self.logger.info(
            f"Detection complete: {result.total_count} games in {result.run_time_ms:.1f}ms"
        )

        return result
