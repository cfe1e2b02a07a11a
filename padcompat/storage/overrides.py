"""Override Store - manual compatibility labels set by the user.

Overrides live in a plain text sidecar file, one "<entry id>:<label>"
per line. They are consulted before the compatibility database.
"""

import logging
import os
import threading
from collections.abc import Iterator
from pathlib import Path

from padcompat.core.config import Config, get_default_config
from padcompat.core.models import SupportLevel

logger = logging.getLogger("padcompat.storage.overrides")

UNKNOWN_LABEL = "Unknown"

_LABEL_LEVELS = {
    "full": SupportLevel.FULL,
    "partial": SupportLevel.PARTIAL,
    "none": SupportLevel.NONE,
}


def parse_support_label(label: str | None) -> SupportLevel:
    """Map a raw override label to a support level.

    "Full", "Partial" and "None" are recognized case-insensitively;
    anything else maps to UNKNOWN.
    """
    return _LABEL_LEVELS.get((label or "").strip().lower(), SupportLevel.UNKNOWN)


class OverrideStore:
    """Sidecar mapping from catalog entry id to a raw compatibility label.

    Example:
        overrides = OverrideStore(config)
        overrides.set(entry.id, "Full")
        overrides.save()
    """

    def __init__(
        self,
        config: Config | None = None,
        overrides_path: Path | None = None,
    ) -> None:
        self.config = config or get_default_config()
        self.overrides_path = overrides_path or self.config.overrides_path
        self._overrides: dict[str, str] = {}
        self._lock = threading.RLock()
        self.load()

    def load(self) -> None:
        """Load overrides from disk. Malformed lines are skipped."""
        with self._lock:
            self._overrides = {}
            if not self.overrides_path.exists():
                return

            try:
                lines = self.overrides_path.read_text(encoding="utf-8").splitlines()
            except Exception as e:
                logger.error(f"Error loading overrides: {e}")
                return

            for line in lines:
                parts = line.strip().split(":")
                if len(parts) == 2 and parts[0] and parts[1]:
                    self._overrides[parts[0]] = parts[1]
                elif line.strip():
                    logger.debug(f"Ignoring malformed override line: {line!r}")

    def save(self) -> bool:
        """Save overrides to disk.

        Returns:
            True if saved, False on failure.
        """
        with self._lock:
            content = "".join(f"{entry_id}:{label}\n" for entry_id, label in self._overrides.items())
            temp_path = self.overrides_path.with_name(self.overrides_path.name + ".tmp")

            try:
                self.overrides_path.parent.mkdir(parents=True, exist_ok=True)
                temp_path.write_text(content, encoding="utf-8")
                os.replace(temp_path, self.overrides_path)
            except Exception as e:
                logger.error(f"Error saving overrides: {e}")
                return False

            return True

    def get(self, entry_id: str) -> str | None:
        """Get the raw override label for an entry, if any."""
        with self._lock:
            return self._overrides.get(entry_id)

    def get_level(self, entry_id: str) -> SupportLevel:
        """Get the override for an entry as a support level (UNKNOWN if unset)."""
        return parse_support_label(self.get(entry_id))

    def set(self, entry_id: str, label: str) -> None:
        """Set the override label for an entry.

        Raises:
            ValueError: If the id or label would corrupt the sidecar format.
        """
        if not entry_id or ":" in entry_id or "\n" in entry_id:
            raise ValueError(f"Invalid entry id for override: {entry_id!r}")
        if not label or ":" in label or "\n" in label:
            raise ValueError(f"Invalid override label: {label!r}")

        with self._lock:
            self._overrides[entry_id] = label

    def remove(self, entry_id: str) -> bool:
        """Remove the override for an entry.

        Returns:
            True if removed, False if not found
        """
        with self._lock:
            return self._overrides.pop(entry_id, None) is not None

    def items(self) -> list[tuple[str, str]]:
        """Get a snapshot of all (entry id, label) pairs."""
        with self._lock:
            return list(self._overrides.items())

    def __contains__(self, entry_id: object) -> bool:
        with self._lock:
            return entry_id in self._overrides

    def __len__(self) -> int:
        with self._lock:
            return len(self._overrides)

    def __iter__(self) -> Iterator[str]:
        return iter([entry_id for entry_id, _ in self.items()])
