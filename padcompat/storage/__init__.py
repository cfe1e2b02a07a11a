"""Persistence of compatibility records and manual overrides."""

from .database import CompatibilityDatabase, create_compatibility_database, derive_game_key
from .overrides import OverrideStore, parse_support_label

__all__ = [
    "CompatibilityDatabase",
    "create_compatibility_database",
    "derive_game_key",
    "OverrideStore",
    "parse_support_label",
]
