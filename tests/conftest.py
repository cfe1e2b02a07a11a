"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def config(tmp_path):
    """Create a configuration rooted in a temporary directory."""
    from padcompat.core.config import Config

    return Config(config_dir=tmp_path)


@pytest.fixture
def make_entry():
    """Factory for catalog entries with neutral defaults."""
    from padcompat.core.models import CatalogEntry

    def _make(name: str = "Quiet Meadow", entry_id: str | None = None, **kwargs) -> CatalogEntry:
        return CatalogEntry(id=entry_id or name.lower().replace(" ", "-"), name=name, **kwargs)

    return _make


@pytest.fixture
def strategy_entry(make_entry):
    """A 2005 PC strategy game with no other signal."""
    return make_entry(
        "Empire Ledger",
        genres=["Strategy"],
        release_date=2005,
        platforms=["PC"],
    )


@pytest.fixture
def sample_entries(make_entry):
    """Create a small catalog of entries for testing."""
    return [
        make_entry(
            "Rocket Rally",
            game_id="1001",
            source="Steam",
            genres=["Racing", "Sports"],
            features=["Full Controller Support"],
            release_date="2019-05-01",
            platforms=["PC", "Xbox One"],
        ),
        make_entry(
            "Ledger of Kings",
            game_id="1002",
            source="Steam",
            genres=["Real-Time Strategy"],
            tags=["Mouse Only"],
            release_date=1998,
            description="Keyboard only. Mouse required for all commands.",
        ),
        make_entry(
            "Quiet Meadow",
            release_date="2012-03-10",
            platforms=["Windows"],
        ),
    ]


@pytest.fixture
def catalog_file(tmp_path, sample_entries):
    """Write the sample entries to a catalog JSON file."""
    import json

    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps({"games": [e.to_dict() for e in sample_entries]}),
        encoding="utf-8",
    )
    return path
