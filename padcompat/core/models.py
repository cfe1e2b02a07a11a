"""Core data models for PadCompat.

This module defines all enums, data classes, and type definitions used
throughout the application.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


class SupportLevel(Enum):
    """Gamepad support classification for a game.

    Each value is a distinct classification, not a point on a scale.

    Levels:
        UNKNOWN: Not analyzed, or no usable signal
        NONE: No controller support
        PARTIAL: Limited controller support
        FULL: Full native controller support
        COMMUNITY: Community configurations available
    """

    UNKNOWN = "Unknown"
    NONE = "None"
    PARTIAL = "Partial"
    FULL = "Full"
    COMMUNITY = "Community"


class CompatibilitySource(Enum):
    """Provenance of a compatibility record.

    Sources:
        UNKNOWN: Unspecified origin
        OFFICIAL: From the game developer or publisher
        COMMUNITY: From a community database (reserved)
        USER: Set manually by the user
        AUTO_DETECTED: Produced by the classifier
    """

    UNKNOWN = "Unknown"
    OFFICIAL = "Official"
    COMMUNITY = "Community"
    USER = "User"
    AUTO_DETECTED = "AutoDetected"


def _names(items: list[Any]) -> list[str]:
    """Flatten a list of names or {"name": ...} objects into strings."""
    names: list[str] = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("name") or item.get("Name")
        if item:
            names.append(str(item))
    return names


@dataclass
class CatalogEntry:
    """A game as exposed by the host library catalog.

    The core only reads catalog entries; they are owned by the host.

    Attributes:
        id: Host-side identifier of the entry
        name: Display name
        game_id: Identifier assigned by the originating library (may be empty)
        source: Name of the originating library, e.g. "Steam" (may be empty)
        install_directory: Installation directory, if installed
        launch_targets: Ordered list of launch target paths
        genres: Genre names
        tags: Tag names
        features: Feature names
        platforms: Platform names
        publishers: Publisher names
        release_date: Release date as date, datetime, ISO string or year
        description: Free-text description
    """

    id: str
    name: str
    game_id: str = ""
    source: str = ""
    install_directory: Path | None = None
    launch_targets: list[Path] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    platforms: list[str] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    release_date: date | str | int | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogEntry":
        """Create a catalog entry from a dictionary.

        Accepts both camelCase keys (as exported by library managers) and
        snake_case keys.

        Raises:
            ValueError: If the entry has neither an id nor a name.
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        name = str(pick("name", "gameName", default=""))
        entry_id = str(pick("id", "gameId", "game_id", default="") or name)
        if not entry_id:
            raise ValueError("Catalog entry has neither an id nor a name")

        install_dir = pick("installDirectory", "install_directory")

        return cls(
            id=entry_id,
            name=name,
            game_id=str(pick("gameId", "game_id", default="")),
            source=str(pick("source", "library", default="")),
            install_directory=Path(install_dir) if install_dir else None,
            launch_targets=[Path(p) for p in pick("launchTargets", "launch_targets", default=[])],
            genres=_names(pick("genres", default=[])),
            tags=_names(pick("tags", default=[])),
            features=_names(pick("features", default=[])),
            platforms=_names(pick("platforms", default=[])),
            publishers=_names(pick("publishers", default=[])),
            release_date=pick("releaseDate", "release_date"),
            description=pick("description"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert the entry to a JSON-serializable dictionary."""
        release = self.release_date
        if isinstance(release, date):
            release = release.isoformat()

        return {
            "id": self.id,
            "name": self.name,
            "gameId": self.game_id,
            "source": self.source,
            "installDirectory": str(self.install_directory) if self.install_directory else None,
            "launchTargets": [str(p) for p in self.launch_targets],
            "genres": list(self.genres),
            "tags": list(self.tags),
            "features": list(self.features),
            "platforms": list(self.platforms),
            "publishers": list(self.publishers),
            "releaseDate": release,
            "description": self.description,
        }


@dataclass
class DetectionOpinion:
    """One extractor's confidence-weighted guess at a support level.

    Confidence is clamped into [0.0, 1.0] on construction.

    Attributes:
        level: Suggested support level
        confidence: Confidence in the suggestion (0.0-1.0)
        method: Label of the extractor that produced the opinion
    """

    level: SupportLevel
    confidence: float
    method: str

    def __post_init__(self) -> None:
        self.confidence = max(0.0, min(1.0, float(self.confidence)))


@dataclass
class CompatibilityRecord:
    """Persisted compatibility information for one game.

    Attributes:
        game_id: Host identifier of the game
        game_name: Display name at the time of the last write
        support_level: Stored support level
        notes: Optional free-text notes
        source: Provenance of the support level
        last_updated: Timestamp of the last write
        recommended_configurations: Suggested controller configurations
        community_rating: Rating 1-5, or 0 when unrated
        total_ratings: Number of ratings received
    """

    game_id: str
    game_name: str
    support_level: SupportLevel = SupportLevel.UNKNOWN
    notes: str | None = None
    source: CompatibilitySource = CompatibilitySource.UNKNOWN
    last_updated: datetime = field(default_factory=datetime.now)
    recommended_configurations: list[str] = field(default_factory=list)
    community_rating: int = 0
    total_ratings: int = 0

    def __post_init__(self) -> None:
        if self.community_rating != 0 and not 1 <= self.community_rating <= 5:
            raise ValueError(f"Community rating must be 0 or 1-5, got {self.community_rating}")
        if self.total_ratings < 0:
            raise ValueError(f"Total ratings cannot be negative, got {self.total_ratings}")

    @property
    def is_controller_ready(self) -> bool:
        """Check if the game is playable with a controller."""
        return self.support_level in (SupportLevel.FULL, SupportLevel.PARTIAL)
