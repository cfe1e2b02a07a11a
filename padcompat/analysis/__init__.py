"""Analysis module - library-wide compatibility statistics."""

from .statistics import CompatibilityStatistics

__all__ = [
    "CompatibilityStatistics",
]
