"""Signal Extractors - independent opinions on controller support.

Each extractor inspects one facet of a catalog entry (install files,
launch targets, description, genres/tags/features, release date,
platforms, publishers) and returns a DetectionOpinion. Extractors never
raise: any failure is turned into an UNKNOWN opinion with zero confidence.

Lookup tables are ordered; the first matching entry wins, so table order
encodes priority.
"""

import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from padcompat.core.models import CatalogEntry, DetectionOpinion, SupportLevel

logger = logging.getLogger("padcompat.classification.extractors")

# Method labels. The combiner recognises file-based evidence by the
# "Engine" and "Executable" substrings.
METHOD_ENGINE = "Game Engine Analysis"
METHOD_EXECUTABLE = "Executable Analysis"
METHOD_METADATA = "Metadata Analysis"
METHOD_GENRE_TAGS = "Genre & Tags Analysis"
METHOD_RELEASE_DATE = "Release Date Analysis"
METHOD_PLATFORM = "Platform Analysis"
METHOD_PUBLISHER = "Publisher Analysis"

# (engine, filename substrings, support level)
ENGINE_INDICATORS: list[tuple[str, tuple[str, ...], SupportLevel]] = [
    ("Unreal Engine", ("ue4game.exe", "engine.ini", "unrealengine"), SupportLevel.FULL),
    ("Unity", ("unityplayer.dll", "unityengine", "mono.dll"), SupportLevel.FULL),
    ("Source", ("sourceengine", "hl2.exe", "engine.dll"), SupportLevel.PARTIAL),
    ("DirectX", ("d3d11.dll", "xinput1_3.dll", "dinput8.dll"), SupportLevel.PARTIAL),
    ("SDL", ("sdl2.dll", "sdl.dll"), SupportLevel.FULL),
    ("GameMaker", ("game.exe", "data.win"), SupportLevel.PARTIAL),
    ("Godot", ("godot", "godot.exe"), SupportLevel.FULL),
    ("Ren'Py", ("renpy", "renpy.exe"), SupportLevel.PARTIAL),
    ("NW.js", ("nw.exe", "nwjs"), SupportLevel.PARTIAL),
]

# Engine names looked for in the game title when file evidence is weak
KNOWN_ENGINES: list[tuple[str, SupportLevel]] = [
    ("unreal", SupportLevel.FULL),
    ("unity", SupportLevel.FULL),
    ("source", SupportLevel.PARTIAL),
    ("gamemaker", SupportLevel.FULL),
    ("construct", SupportLevel.PARTIAL),
    ("godot", SupportLevel.FULL),
]

EXECUTABLE_PATTERNS: list[tuple[re.Pattern[str], SupportLevel]] = [
    (re.compile(r".*-win64.*\.exe$", re.IGNORECASE), SupportLevel.PARTIAL),
    (re.compile(r".*unity.*\.exe$", re.IGNORECASE), SupportLevel.FULL),
    (re.compile(r".*unreal.*\.exe$", re.IGNORECASE), SupportLevel.FULL),
]

POSITIVE_KEYWORDS = [
    "controller support",
    "gamepad",
    "xbox controller",
    "playstation controller",
    "full controller",
    "controller compatible",
]

NEGATIVE_KEYWORDS = [
    "keyboard only",
    "mouse required",
    "no controller",
]

GENRE_WEIGHTS: dict[str, float] = {
    # Controller-friendly
    "action": 0.8,
    "adventure": 0.6,
    "racing": 0.9,
    "sports": 0.9,
    "fighting": 0.9,
    "platformer": 0.8,
    "shooter": 0.7,
    "rpg": 0.6,
    "arcade": 0.8,
    "simulation": 0.4,
    # Neutral
    "puzzle": 0.0,
    "indie": 0.0,
    # Keyboard/mouse preferred
    "strategy": -0.7,
    "real-time strategy": -0.8,
    "rts": -0.8,
    "turn-based strategy": -0.6,
    "point & click": -0.8,
    "visual novel": -0.5,
    "management": -0.6,
    "city builder": -0.7,
    "mmorpg": -0.4,
}

TAG_WEIGHTS: dict[str, float] = {
    "controller": 0.9,
    "gamepad": 0.9,
    "xbox controller": 0.9,
    "playstation controller": 0.9,
    "full controller support": 1.0,
    "partial controller support": 0.6,
    "co-op": 0.4,
    "local co-op": 0.5,
    "split screen": 0.6,
    "multiplayer": 0.3,
    "keyboard only": -1.0,
    "mouse only": -1.0,
    "point and click": -0.8,
    "text heavy": -0.4,
    "menu heavy": -0.3,
    "complex ui": -0.4,
}

FEATURE_WEIGHTS: dict[str, float] = {
    "full controller support": 1.0,
    "partial controller support": 0.6,
    "steam controller support": 0.8,
    "xbox controller support": 0.9,
    "playstation controller support": 0.9,
    "remote play": 0.5,
    "local co-op": 0.6,
    "shared/split screen": 0.7,
}

CONSOLE_PLATFORMS = ["xbox", "playstation", "nintendo", "switch", "ps3", "ps4", "ps5"]
PC_PLATFORMS = ["pc", "windows", "linux", "mac"]

CONTROLLER_FRIENDLY_PUBLISHERS = [
    "microsoft",
    "sony",
    "nintendo",
    "valve",
    "ubisoft",
    "activision",
    "electronic arts",
    "ea",
    "square enix",
    "capcom",
    "bandai namco",
]


def _scan_install_directory(install_dir: Path) -> tuple[SupportLevel, float] | None:
    """Look for engine indicator files under an install directory.

    Returns:
        (level, confidence) for the first matching engine indicator,
        (PARTIAL, 0.4) if only executables were found, or None.
    """
    file_names: list[str] = []
    try:
        for _root, _dirs, files in os.walk(install_dir):
            file_names.extend(f.lower() for f in files)
    except OSError as e:
        logger.debug(f"Cannot scan {install_dir}: {e}")
        return None

    for engine, markers, level in ENGINE_INDICATORS:
        if any(marker in name for marker in markers for name in file_names):
            logger.debug(f"Found {engine} indicators in {install_dir}")
            return level, 0.8

    if any(name.endswith(".exe") for name in file_names):
        return SupportLevel.PARTIAL, 0.4

    return None


def detect_by_game_engine(entry: CatalogEntry) -> DetectionOpinion:
    """Detect support from engine files in the install directory.

    Falls back to engine names in the game title when the directory gives
    no strong signal (confidence below 0.5).
    """
    level = SupportLevel.UNKNOWN
    confidence = 0.0

    install_dir = entry.install_directory
    if install_dir and Path(install_dir).is_dir():
        found = _scan_install_directory(Path(install_dir))
        if found is not None:
            level, confidence = found

    if confidence < 0.5:
        name = (entry.name or "").lower()
        for engine, engine_level in KNOWN_ENGINES:
            if engine in name:
                level = engine_level
                confidence = 0.3
                break

    return DetectionOpinion(level, confidence, METHOD_ENGINE)


def detect_by_executable(entry: CatalogEntry) -> DetectionOpinion:
    """Detect support from launch target file names."""
    level = SupportLevel.UNKNOWN
    confidence = 0.0

    for target in entry.launch_targets:
        path = Path(target)
        if not path.is_file():
            continue

        file_name = path.name.lower()
        for pattern, pattern_level in EXECUTABLE_PATTERNS:
            if pattern.match(file_name):
                # Flat confidence per match, so the first matching target is kept
                if confidence < 0.5:
                    level = pattern_level
                    confidence = 0.5
                break

    return DetectionOpinion(level, confidence, METHOD_EXECUTABLE)


def count_controller_mentions(text: str) -> tuple[int, int]:
    """Count positive and negative controller phrases in lowercased text.

    Returns:
        (positive_mentions, negative_mentions)
    """
    positive = sum(text.count(keyword) for keyword in POSITIVE_KEYWORDS)
    negative = sum(text.count(keyword) for keyword in NEGATIVE_KEYWORDS)
    return positive, negative


def detect_by_metadata(entry: CatalogEntry) -> DetectionOpinion:
    """Detect support from controller mentions in the description."""
    description = (entry.description or "").lower()
    positive, negative = count_controller_mentions(description)

    if positive > negative:
        level = SupportLevel.FULL if positive > 2 else SupportLevel.PARTIAL
        return DetectionOpinion(level, min(0.8, positive * 0.2), METHOD_METADATA)

    if negative > 0:
        return DetectionOpinion(SupportLevel.NONE, min(0.6, negative * 0.3), METHOD_METADATA)

    return DetectionOpinion(SupportLevel.UNKNOWN, 0.0, METHOD_METADATA)


def _weighted_sum(names: list[str], weights: dict[str, float]) -> float:
    return sum(weights.get(name.lower(), 0.0) for name in names if name)


def genre_tag_feature_score(entry: CatalogEntry) -> float:
    """Combined genre/tag/feature score (0.4 / 0.3 / 0.3 weighting)."""
    genre_score = _weighted_sum(entry.genres, GENRE_WEIGHTS)
    tag_score = _weighted_sum(entry.tags, TAG_WEIGHTS)
    feature_score = _weighted_sum(entry.features, FEATURE_WEIGHTS)
    return genre_score * 0.4 + tag_score * 0.3 + feature_score * 0.3


def detect_by_genre_and_tags(entry: CatalogEntry) -> DetectionOpinion:
    """Detect support from genres, tags and features."""
    score = genre_tag_feature_score(entry)

    if score > 0.5:
        return DetectionOpinion(SupportLevel.FULL, min(0.8, score), METHOD_GENRE_TAGS)
    if score > 0.1:
        return DetectionOpinion(SupportLevel.PARTIAL, max(0.4, abs(score)), METHOD_GENRE_TAGS)
    if score > -0.2:
        return DetectionOpinion(SupportLevel.PARTIAL, 0.3, METHOD_GENRE_TAGS)
    return DetectionOpinion(SupportLevel.NONE, min(0.6, abs(score)), METHOD_GENRE_TAGS)


def release_year(value: date | str | int | None) -> int | None:
    """Extract the release year from a date, ISO string or bare year.

    Raises:
        ValueError: If the value cannot be interpreted as a date.
    """
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.year
    if isinstance(value, bool):
        raise ValueError(f"Invalid release date: {value!r}")
    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not text:
        return None
    if text.isdigit() and len(text) == 4:
        return int(text)
    return datetime.fromisoformat(text).year


def detect_by_release_date(entry: CatalogEntry) -> DetectionOpinion:
    """Detect support from the release year."""
    year = release_year(entry.release_date)

    if year is None:
        return DetectionOpinion(SupportLevel.PARTIAL, 0.4, METHOD_RELEASE_DATE)
    if year >= 2018:
        return DetectionOpinion(SupportLevel.FULL, 0.7, METHOD_RELEASE_DATE)
    if year >= 2010:
        return DetectionOpinion(SupportLevel.PARTIAL, 0.6, METHOD_RELEASE_DATE)
    if year >= 2000:
        return DetectionOpinion(SupportLevel.PARTIAL, 0.4, METHOD_RELEASE_DATE)
    # Very old games rarely have native controller support
    return DetectionOpinion(SupportLevel.NONE, 0.5, METHOD_RELEASE_DATE)


def detect_by_platform(entry: CatalogEntry) -> DetectionOpinion:
    """Detect support from platform names."""
    platforms = [p.lower() for p in entry.platforms if p]

    if any(console in p for p in platforms for console in CONSOLE_PLATFORMS):
        return DetectionOpinion(SupportLevel.FULL, 0.8, METHOD_PLATFORM)
    if any(pc in p for p in platforms for pc in PC_PLATFORMS):
        return DetectionOpinion(SupportLevel.PARTIAL, 0.6, METHOD_PLATFORM)
    return DetectionOpinion(SupportLevel.PARTIAL, 0.5, METHOD_PLATFORM)


def detect_by_publisher(entry: CatalogEntry) -> DetectionOpinion:
    """Detect support from the first listed publisher."""
    publisher = (entry.publishers[0] if entry.publishers else "") or ""
    publisher = publisher.lower()

    if publisher and any(p in publisher for p in CONTROLLER_FRIENDLY_PUBLISHERS):
        return DetectionOpinion(SupportLevel.PARTIAL, 0.3, METHOD_PUBLISHER)
    return DetectionOpinion(SupportLevel.UNKNOWN, 0.0, METHOD_PUBLISHER)


@dataclass
class SignalExtractor:
    """A named signal extractor.

    Attributes:
        method: Method label carried by the produced opinions
        extract_fn: Function producing the opinion
    """

    method: str
    extract_fn: Callable[[CatalogEntry], DetectionOpinion]

    def extract(self, entry: CatalogEntry) -> DetectionOpinion:
        """Run the extractor, converting any failure into an UNKNOWN opinion."""
        try:
            return self.extract_fn(entry)
        except Exception as e:
            logger.debug(f"{self.method} failed for {getattr(entry, 'name', '?')}: {e}")
            return DetectionOpinion(SupportLevel.UNKNOWN, 0.0, self.method)


# All extractors, in the order the classifier runs them
SIGNAL_EXTRACTORS: list[SignalExtractor] = [
    SignalExtractor(METHOD_ENGINE, detect_by_game_engine),
    SignalExtractor(METHOD_EXECUTABLE, detect_by_executable),
    SignalExtractor(METHOD_METADATA, detect_by_metadata),
    SignalExtractor(METHOD_GENRE_TAGS, detect_by_genre_and_tags),
    SignalExtractor(METHOD_RELEASE_DATE, detect_by_release_date),
    SignalExtractor(METHOD_PLATFORM, detect_by_platform),
    SignalExtractor(METHOD_PUBLISHER, detect_by_publisher),
]
