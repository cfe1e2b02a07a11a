"""CLI module for PadCompat."""

from .commands import (
    run_classify_command,
    run_explain_command,
    run_list_command,
    run_set_command,
    run_stats_command,
)
from .formatters import (
    JsonFormatter,
    OutputFormatter,
    TextFormatter,
    format_detection_run,
    format_record,
    format_record_list,
    format_statistics,
)

__all__ = [
    # Formatters
    "OutputFormatter",
    "TextFormatter",
    "JsonFormatter",
    "format_record",
    "format_record_list",
    "format_statistics",
    "format_detection_run",
    # Commands
    "run_classify_command",
    "run_explain_command",
    "run_set_command",
    "run_list_command",
    "run_stats_command",
]
