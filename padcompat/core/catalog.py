"""Catalog loading - reads library exports into CatalogEntry objects."""

import json
import logging
from pathlib import Path

from padcompat.core.models import CatalogEntry

logger = logging.getLogger("padcompat.core.catalog")


class CatalogError(Exception):
    """Raised when a catalog file cannot be read."""


def load_catalog(path: Path) -> list[CatalogEntry]:
    """Load catalog entries from a JSON file.

    The file holds either a list of entry objects or an object with a
    "games" list. Entries that fail to parse are skipped.

    Args:
        path: Path to the catalog file.

    Returns:
        List of CatalogEntry objects.

    Raises:
        CatalogError: If the file is missing or not a valid catalog.
    """
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Invalid catalog file {path}: {e}") from e

    if isinstance(data, dict):
        items = data.get("games", [])
    elif isinstance(data, list):
        items = data
    else:
        raise CatalogError(f"Invalid catalog format in {path}")

    entries: list[CatalogEntry] = []
    for item in items:
        try:
            entries.append(CatalogEntry.from_dict(item))
        except Exception as e:
            logger.warning(f"Failed to parse catalog entry: {e}")

    logger.info(f"Loaded {len(entries)} catalog entries from {path}")
    return entries


def find_entry(entries: list[CatalogEntry], query: str) -> CatalogEntry | None:
    """Find an entry by id, then exact name, then id prefix (case-insensitive)."""
    lowered = query.lower()

    for entry in entries:
        if entry.id == query:
            return entry

    for entry in entries:
        if entry.name.lower() == lowered:
            return entry

    for entry in entries:
        if entry.id.lower().startswith(lowered):
            return entry

    return None
