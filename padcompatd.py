#!/usr/bin/env python3
"""PadCompat - Controller Compatibility Classifier.

Entry point for the command-line interface.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from padcompat import __version__
from padcompat.core.config import (
    DEFAULT_CONFIG_FILE,
    Config,
    load_config,
    save_config,
    validate_config,
)
from padcompat.core.logging_config import get_logger, setup_logging
from padcompat.core.models import SupportLevel
from padcompat.ui.cli.commands import (
    run_classify_command,
    run_explain_command,
    run_list_command,
    run_set_command,
    run_stats_command,
)

LEVEL_CHOICES = [level.value for level in SupportLevel]
MANUAL_LEVEL_CHOICES = ["Full", "Partial", "None", "Unknown"]


def _level_name(value: str) -> str:
    """Normalize a support level typed on the command line ("full" -> "Full")."""
    for choice in LEVEL_CHOICES:
        if choice.lower() == value.lower():
            return choice
    return value


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="padcompatd",
        description="Controller compatibility classifier for game libraries",
        epilog="For more information, see the documentation.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--database",
        type=Path,
        help="Path to the compatibility database (overrides configuration)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress console output",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Classify command
    classify_parser = subparsers.add_parser("classify", help="Detect compatibility for a catalog")
    classify_parser.add_argument("catalog", type=Path, help="Catalog JSON file")
    classify_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    classify_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write results to file",
    )
    classify_parser.add_argument(
        "--force",
        action="store_true",
        help="Re-classify games that already have a stored level or override",
    )

    # Explain command
    explain_parser = subparsers.add_parser("explain", help="Show how a game is classified")
    explain_parser.add_argument("catalog", type=Path, help="Catalog JSON file")
    explain_parser.add_argument("game", help="Game name or ID")
    explain_parser.add_argument(
        "--json",
        action="store_true",
        help="Output the decision as JSON",
    )

    # Set command
    set_parser = subparsers.add_parser("set", help="Set compatibility manually")
    set_parser.add_argument("catalog", type=Path, help="Catalog JSON file")
    set_parser.add_argument("game", help="Game name or ID")
    set_parser.add_argument("level", type=_level_name, choices=MANUAL_LEVEL_CHOICES)
    set_parser.add_argument("--notes", help="Notes to store with the level")

    # List command
    list_parser = subparsers.add_parser("list", help="List stored compatibility records")
    list_parser.add_argument(
        "--filter", "-f",
        type=_level_name,
        choices=LEVEL_CHOICES,
        help="Filter by support level",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show compatibility statistics")
    stats_parser.add_argument(
        "--json",
        action="store_true",
        help="Output statistics as JSON",
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser


def get_log_level(verbose: int) -> int:
    """Get logging level from verbosity count."""
    if verbose >= 2:
        return logging.DEBUG
    elif verbose >= 1:
        return logging.INFO
    return logging.WARNING


def run_config(args: argparse.Namespace, config: Config) -> int:
    """Execute the config command."""
    if args.init:
        save_config(config, args.config)
        print(f"Configuration saved to {args.config or config.config_dir / DEFAULT_CONFIG_FILE}")
        return 0

    if args.show:
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    print("Use --init to create config or --show to display current config")
    return 1


def main() -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    # Load configuration
    try:
        config = load_config(args.config) if args.config else load_config()
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: Could not read configuration: {e}")
        return 1

    errors = validate_config(config)
    if errors:
        for error in errors:
            print(f"Configuration error: {error}")
        return 1

    # Setup logging
    log_level = get_log_level(args.verbose)
    setup_logging(
        config.logs_dir,
        log_level=log_level,
        console_output=not args.quiet,
    )

    # Ensure directories exist
    config.ensure_directories()

    get_logger("main").debug(f"Using data directory {config.data_dir}")

    # Execute command
    if args.command == "classify":
        return run_classify_command(args, config)
    elif args.command == "explain":
        return run_explain_command(args, config)
    elif args.command == "set":
        return run_set_command(args, config)
    elif args.command == "list":
        return run_list_command(args, config)
    elif args.command == "stats":
        return run_stats_command(args, config)
    elif args.command == "config":
        return run_config(args, config)
    elif args.command is None:
        parser.print_help()
        return 0
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
