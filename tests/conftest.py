"""Shared fixtures for tick-tracker tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from tick_tracker.config import get_settings
from tick_tracker.datasources.sightings import DatasetHandle, SightingRecord, load_sightings

LONDON = ZoneInfo("Europe/London")

HEADER = "id,date,location,species,latinName"

SAMPLE_ROWS = [
    "1,2020-01-15T10:00:00,London,Ixodes ricinus,I. ricinus",
    "2,2020-02-15T10:00:00,London,Ixodes ricinus,I. ricinus",
    "1,2020-03-01T10:00:00,Leeds,X,Y",
]


def make_record(
    sighting_id: str,
    when: str,
    location: str = "London",
    species: str = "Ixodes ricinus",
    latin_name: str = "I. ricinus",
) -> SightingRecord:
    """Build a record with a London-local timestamp from ``YYYY-MM-DDTHH:MM``."""
    return SightingRecord(
        id=sighting_id,
        timestamp=datetime.fromisoformat(when).replace(tzinfo=LONDON),
        location=location,
        species=species,
        latin_name=latin_name,
    )


def handle_for(rows: list[str]) -> DatasetHandle:
    """A handle that loads ``rows`` (header prepended) on demand."""
    return DatasetHandle(lambda: load_sightings([HEADER, *rows], LONDON))


@pytest.fixture
def london() -> ZoneInfo:
    return LONDON


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    """Write the sample dataset to a file and return its path."""
    path = tmp_path / "tick_sightings.csv"
    path.write_text("\n".join([HEADER, *SAMPLE_ROWS]) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def settings_env(
    monkeypatch: pytest.MonkeyPatch, sample_csv: Path, tmp_path: Path
) -> Iterator[Path]:
    """Point settings at the sample dataset and a scratch cache dir."""
    monkeypatch.setenv("TICK_DATASET_PATH", str(sample_csv))
    monkeypatch.setenv("TICK_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("TICK_DATASET_URL", raising=False)
    get_settings.cache_clear()
    yield sample_csv
    get_settings.cache_clear()
