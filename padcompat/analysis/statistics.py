"""Compatibility statistics for a library.

Aggregates stored compatibility records into per-level and per-source
counts, including the share of games that are playable with a controller.
"""

from dataclasses import dataclass, field
from typing import Any

from padcompat.core.models import CompatibilityRecord, CompatibilitySource, SupportLevel


@dataclass
class CompatibilityStatistics:
    """Aggregated compatibility counts.

    Attributes:
        total: Number of records
        by_level: Record count for every support level (zero-filled)
        by_source: Record count for every compatibility source (zero-filled)
    """

    total: int = 0
    by_level: dict[SupportLevel, int] = field(
        default_factory=lambda: {level: 0 for level in SupportLevel}
    )
    by_source: dict[CompatibilitySource, int] = field(
        default_factory=lambda: {source: 0 for source in CompatibilitySource}
    )

    @classmethod
    def from_records(cls, records: list[CompatibilityRecord]) -> "CompatibilityStatistics":
        """Build statistics from a list of records."""
        stats = cls()
        for record in records:
            stats.total += 1
            stats.by_level[record.support_level] += 1
            stats.by_source[record.source] += 1
        return stats

    @property
    def controller_ready(self) -> int:
        """Number of games with full or partial controller support."""
        return self.by_level[SupportLevel.FULL] + self.by_level[SupportLevel.PARTIAL]

    def percentage(self, level: SupportLevel) -> float:
        """Share of games with a support level, in percent."""
        if self.total == 0:
            return 0.0
        return self.by_level[level] / self.total * 100

    @property
    def controller_ready_percentage(self) -> float:
        """Share of controller-ready games, in percent."""
        if self.total == 0:
            return 0.0
        return self.controller_ready / self.total * 100

    def to_dict(self) -> dict[str, Any]:
        """Convert statistics to a dictionary for JSON serialization."""
        return {
            "total": self.total,
            "by_level": {level.value: count for level, count in self.by_level.items()},
            "by_source": {source.value: count for source, count in self.by_source.items()},
            "controller_ready": self.controller_ready,
            "controller_ready_percentage": round(self.controller_ready_percentage, 1),
        }
