"""Core module - models, configuration, and infrastructure."""

from .catalog import CatalogError, find_entry, load_catalog
from .config import Config, load_config, save_config, validate_config
from .logging_config import setup_logging
from .models import (
    CatalogEntry,
    CompatibilityRecord,
    CompatibilitySource,
    DetectionOpinion,
    SupportLevel,
)

__all__ = [
    # Models
    "SupportLevel",
    "CompatibilitySource",
    "CatalogEntry",
    "DetectionOpinion",
    "CompatibilityRecord",
    # Catalog
    "CatalogError",
    "load_catalog",
    "find_entry",
    # Config
    "Config",
    "load_config",
    "save_config",
    "validate_config",
    "setup_logging",
]
