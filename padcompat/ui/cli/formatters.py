"""Output formatters for CLI output.

This module provides formatters for displaying compatibility records,
classification decisions, detection runs and statistics as colored
text or JSON.
"""

import json
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from padcompat.analysis.statistics import CompatibilityStatistics
from padcompat.classification.engine import ClassificationDecision
from padcompat.core.models import CompatibilityRecord, CompatibilitySource, SupportLevel
from padcompat.core.orchestrator import DetectionRunResult
from padcompat.storage.database import record_to_dict


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Support level colors
    FULL = "\033[92m"       # Green
    PARTIAL = "\033[93m"    # Yellow
    NONE = "\033[91m"       # Red
    COMMUNITY = "\033[96m"  # Cyan
    UNKNOWN = "\033[90m"    # Gray

    # Status colors
    SUCCESS = "\033[92m"  # Green
    FAILURE = "\033[91m"  # Red
    WARNING = "\033[93m"  # Yellow
    INFO = "\033[94m"     # Blue

    @classmethod
    def is_supported(cls) -> bool:
        """Check if terminal supports colors."""
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def colorize(text: str, color: str, force: bool = False) -> str:
    """Apply color to text if supported.

    Args:
        text: Text to colorize
        color: ANSI color code
        force: Force color even if not supported

    Returns:
        Colored text or plain text
    """
    if force or Colors.is_supported():
        return f"{color}{text}{Colors.RESET}"
    return text


def get_support_level_color(level: SupportLevel) -> str:
    """Get color for a support level."""
    color_map = {
        SupportLevel.FULL: Colors.FULL,
        SupportLevel.PARTIAL: Colors.PARTIAL,
        SupportLevel.NONE: Colors.NONE,
        SupportLevel.COMMUNITY: Colors.COMMUNITY,
        SupportLevel.UNKNOWN: Colors.UNKNOWN,
    }
    return color_map.get(level, Colors.RESET)


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format_record(self, record: CompatibilityRecord) -> str:
        """Format a single compatibility record."""
        pass

    @abstractmethod
    def format_record_list(self, records: list[CompatibilityRecord]) -> str:
        """Format a list of compatibility records."""
        pass

    @abstractmethod
    def format_decision(self, decision: ClassificationDecision) -> str:
        """Format a classification decision."""
        pass

    @abstractmethod
    def format_statistics(self, stats: CompatibilityStatistics) -> str:
        """Format library statistics."""
        pass

    @abstractmethod
    def format_detection_run(self, result: DetectionRunResult) -> str:
        """Format the result of a detection run."""
        pass


class TextFormatter(OutputFormatter):
    """Plain text formatter with optional colors."""

    def __init__(self, use_colors: bool = True, verbose: bool = False):
        """Initialize the text formatter.

        Args:
            use_colors: Whether to use ANSI colors
            verbose: Whether to show verbose output
        """
        self.use_colors = use_colors and Colors.is_supported()
        self.verbose = verbose

    def _colorize(self, text: str, color: str) -> str:
        """Apply color if enabled."""
        if self.use_colors:
            return colorize(text, color, force=True)
        return text

    def _level_text(self, level: SupportLevel) -> str:
        return self._colorize(level.value, get_support_level_color(level))

    def format_record(self, record: CompatibilityRecord) -> str:
        """Format a single compatibility record."""
        lines = []

        name = self._colorize(record.game_name or "(unnamed)", Colors.BOLD)
        lines.append(f"{name}")
        lines.append(f"  ID: {record.game_id}")
        lines.append(f"  Support: {self._level_text(record.support_level)}")
        lines.append(f"  Source: {record.source.value}")
        lines.append(f"  Updated: {record.last_updated:%Y-%m-%d %H:%M:%S}")

        if record.notes:
            lines.append(f"  Notes: {record.notes}")

        if record.total_ratings:
            lines.append(f"  Rating: {record.community_rating}/5 ({record.total_ratings} ratings)")

        if record.recommended_configurations:
            lines.append("  Recommended configurations:")
            for configuration in record.recommended_configurations:
                lines.append(f"    - {configuration}")

        return "\n".join(lines)

    def format_record_list(self, records: list[CompatibilityRecord]) -> str:
        """Format a list of records as a table."""
        if not records:
            return "No compatibility records found."

        lines = []

        header = f"{'ID':<12} {'Name':<30} {'Support':<10} {'Source':<13} {'Updated':<10}"
        lines.append(self._colorize(header, Colors.BOLD))
        lines.append("-" * 79)

        for record in records:
            # Pad before coloring so escape codes don't break alignment
            level_text = self._colorize(
                f"{record.support_level.value:<10}",
                get_support_level_color(record.support_level),
            )
            name = record.game_name[:28] if len(record.game_name) > 28 else record.game_name
            line = (
                f"{record.game_id[:10]:<12} {name:<30} {level_text} "
                f"{record.source.value:<13} {record.last_updated:%Y-%m-%d}"
            )
            lines.append(line)

        lines.append("-" * 79)
        lines.append(f"Total: {len(records)} games")

        return "\n".join(lines)

    def format_decision(self, decision: ClassificationDecision) -> str:
        """Format a classification decision with the opinion of every extractor."""
        lines = [
            f"{self._colorize(decision.game_name, Colors.BOLD)}",
            f"  Verdict: {self._level_text(decision.support_level)} ({decision.reason})",
            "",
            "  Signals:",
        ]

        for opinion in decision.opinions:
            if opinion.confidence > 0:
                lines.append(
                    f"    {opinion.method:<28} {self._level_text(opinion.level)} "
                    f"({opinion.confidence:.2f})"
                )
            elif self.verbose:
                lines.append(self._colorize(f"    {opinion.method:<28} no signal", Colors.DIM))

        if decision.scores:
            lines.append("")
            lines.append("  Scores:")
            for level, score in decision.scores.items():
                lines.append(f"    {level.value:<10} {score:.2f}")

        return "\n".join(lines)

    def format_statistics(self, stats: CompatibilityStatistics) -> str:
        """Format library statistics."""
        if stats.total == 0:
            return "No compatibility records found."

        ready = self._colorize(str(stats.controller_ready), Colors.SUCCESS)
        lines = [
            self._colorize("Controller Compatibility Statistics", Colors.BOLD),
            f"  Total games: {stats.total}",
            f"  Controller ready: {ready} ({stats.controller_ready_percentage:.1f}%)",
            "",
            "  By support level:",
        ]

        for level in SupportLevel:
            count = stats.by_level[level]
            label = self._colorize(f"{level.value:<10}", get_support_level_color(level))
            lines.append(f"    {label} {count:>5} ({stats.percentage(level):.1f}%)")

        if self.verbose:
            lines.append("")
            lines.append("  By source:")
            for source in CompatibilitySource:
                lines.append(f"    {source.value:<13} {stats.by_source[source]:>5}")

        return "\n".join(lines)

    def format_detection_run(self, result: DetectionRunResult) -> str:
        """Format the result of a detection run."""
        lines = [
            f"Detection completed in {result.run_time_ms:.1f}ms",
            f"Games classified: {result.total_count}",
        ]

        if result.skipped:
            lines.append(f"Skipped (ignored): {len(result.skipped)}")

        lines.append("")
        lines.append("Summary by support level:")
        for level_name, count in result.get_summary().items():
            lines.append(f"  {level_name}: {count}")

        if result.errors:
            lines.append("")
            lines.append(self._colorize("Errors:", Colors.FAILURE))
            for error in result.errors:
                lines.append(f"  - {error}")

        return "\n".join(lines)


class JsonFormatter(OutputFormatter):
    """JSON output formatter."""

    def __init__(self, indent: int = 2):
        """Initialize the JSON formatter.

        Args:
            indent: Indentation level
        """
        self.indent = indent

    def _serialize(self, obj: Any) -> Any:
        """Serialize an object for JSON output."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if hasattr(obj, "value"):  # Enum
            return obj.value
        return str(obj)

    def _dumps(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, default=self._serialize)

    def format_record(self, record: CompatibilityRecord) -> str:
        """Format a single record as JSON."""
        return self._dumps(record_to_dict(record))

    def format_record_list(self, records: list[CompatibilityRecord]) -> str:
        """Format a list of records as JSON."""
        data = {
            "count": len(records),
            "records": [record_to_dict(r) for r in records],
        }
        return self._dumps(data)

    def format_decision(self, decision: ClassificationDecision) -> str:
        """Format a classification decision as JSON."""
        data = {
            "id": decision.entry_id,
            "name": decision.game_name,
            "support_level": decision.support_level.value,
            "reason": decision.reason,
            "opinions": [
                {"method": o.method, "level": o.level.value, "confidence": o.confidence}
                for o in decision.opinions
            ],
            "scores": {level.value: score for level, score in decision.scores.items()},
            "timestamp": decision.timestamp,
        }
        return self._dumps(data)

    def format_statistics(self, stats: CompatibilityStatistics) -> str:
        """Format library statistics as JSON."""
        return self._dumps(stats.to_dict())

    def format_detection_run(self, result: DetectionRunResult) -> str:
        """Format a detection run as JSON."""
        data = {
            "run_time_ms": result.run_time_ms,
            "total_games": result.total_count,
            "summary": result.get_summary(),
            "levels": {entry_id: level.value for entry_id, level in result.levels.items()},
            "skipped": result.skipped,
            "errors": result.errors,
        }
        return self._dumps(data)


# Convenience functions

def get_formatter(as_json: bool = False, verbose: bool = False) -> OutputFormatter:
    """Get a JSON or text formatter."""
    if as_json:
        return JsonFormatter()
    return TextFormatter(verbose=verbose)


def format_record(record: CompatibilityRecord, as_json: bool = False) -> str:
    """Format a compatibility record.

    Args:
        record: Record to format
        as_json: Whether to output JSON

    Returns:
        Formatted string
    """
    return get_formatter(as_json).format_record(record)


def format_record_list(records: list[CompatibilityRecord], as_json: bool = False) -> str:
    """Format a list of compatibility records.

    Args:
        records: Records to format
        as_json: Whether to output JSON

    Returns:
        Formatted string
    """
    return get_formatter(as_json).format_record_list(records)


def format_statistics(stats: CompatibilityStatistics, as_json: bool = False) -> str:
    """Format library statistics."""
    return get_formatter(as_json).format_statistics(stats)


def format_detection_run(result: DetectionRunResult, as_json: bool = False) -> str:
    """Format a detection run result."""
    return get_formatter(as_json).format_detection_run(result)
