"""CLI command implementations.

This module provides the command handlers for all CLI commands.
"""

import argparse

from padcompat.analysis.statistics import CompatibilityStatistics
from padcompat.core.catalog import CatalogError, find_entry, load_catalog
from padcompat.core.config import Config
from padcompat.core.logging_config import get_logger
from padcompat.core.models import CatalogEntry, CompatibilitySource, SupportLevel
from padcompat.core.orchestrator import CompatibilityOrchestrator
from padcompat.storage.database import CompatibilityDatabase
from padcompat.storage.overrides import parse_support_label

from .formatters import (
    JsonFormatter,
    TextFormatter,
    format_detection_run,
    format_record,
    format_record_list,
    format_statistics,
)


def _get_formatter(args: argparse.Namespace) -> TextFormatter | JsonFormatter:
    """Get the appropriate formatter based on args."""
    if getattr(args, "json", False):
        return JsonFormatter()
    return TextFormatter(verbose=getattr(args, "verbose", 0) > 0)


def _create_database(args: argparse.Namespace, config: Config) -> CompatibilityDatabase:
    """Open the compatibility database, honoring --database."""
    return CompatibilityDatabase(
        config=config,
        database_path=getattr(args, "database", None),
        logger=get_logger("main"),
    )


def _create_orchestrator(args: argparse.Namespace, config: Config) -> CompatibilityOrchestrator:
    """Create an orchestrator bound to the selected database."""
    return CompatibilityOrchestrator(config, database=_create_database(args, config))


def _load_entries(args: argparse.Namespace) -> list[CatalogEntry] | None:
    """Load the catalog named on the command line, reporting failures."""
    try:
        return load_catalog(args.catalog)
    except CatalogError as e:
        print(f"Error: {e}")
        return None


def _find_catalog_entry(args: argparse.Namespace) -> CatalogEntry | None:
    """Load the catalog and find the entry named by args.game."""
    entries = _load_entries(args)
    if entries is None:
        return None

    entry = find_entry(entries, args.game)
    if entry is None:
        print(f"Error: Game not found in catalog: {args.game}")
    return entry


def run_classify_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the classify command.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    logger = get_logger("main")

    entries = _load_entries(args)
    if entries is None:
        return 1

    orchestrator = _create_orchestrator(args, config)

    def report_progress(name: str, current: int, total: int) -> None:
        logger.debug(f"[{current}/{total}] {name}")

    result = orchestrator.auto_detect(
        entries,
        force=args.force,
        progress_callback=report_progress,
    )

    output = format_detection_run(result, as_json=args.json)

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Results written to {args.output}")
    else:
        print(output)

    return 1 if result.errors else 0


def run_explain_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the explain command.

    Shows the opinion of every extractor for one game, the resulting
    verdict, and the level currently stored for it.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    entry = _find_catalog_entry(args)
    if entry is None:
        return 1

    orchestrator = _create_orchestrator(args, config)
    decision = orchestrator.classifier.analyze(entry)
    formatter = _get_formatter(args)

    print(formatter.format_decision(decision))

    if not getattr(args, "json", False):
        stored = orchestrator.database.get(entry)
        override = orchestrator.overrides.get(entry.id)
        print()
        print(f"  Stored: {stored.support_level.value} ({stored.source.value})")
        if override is not None:
            print(f"  Manual override: {override}")

    return 0


def run_set_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the set command.

    Records a manual label in the override sidecar and stores the level
    with source USER.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    entry = _find_catalog_entry(args)
    if entry is None:
        return 1

    orchestrator = _create_orchestrator(args, config)

    try:
        orchestrator.set_manual_compatibility([entry], args.level)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    record = orchestrator.database.update(
        entry,
        parse_support_label(args.level),
        CompatibilitySource.USER,
        notes=args.notes,
    )

    print(format_record(record, as_json=getattr(args, "json", False)))
    return 0


def run_list_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the list command.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    database = _create_database(args, config)

    if args.filter:
        records = database.get_by_support_level(SupportLevel(args.filter))
    else:
        records = database.get_all()

    records.sort(key=lambda r: r.game_name.lower())

    print(format_record_list(records, as_json=args.json))
    return 0


def run_stats_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the stats command.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    database = _create_database(args, config)
    stats = CompatibilityStatistics.from_records(database.get_all())

    if args.json:
        print(format_statistics(stats, as_json=True))
    else:
        print(_get_formatter(args).format_statistics(stats))

    return 0
