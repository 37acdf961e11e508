"""Tests for wiring settings to a loaded dataset."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import HEADER, SAMPLE_ROWS
from tick_tracker.config import Settings
from tick_tracker.dataset import (
    CACHED_DATASET_PATH,
    dataset_location,
    ensure_cached,
    load_store,
    open_dataset,
)
from tick_tracker.errors import DatasetUnavailableError
from tick_tracker.store import DataStore

URL = "https://example.org/tick_sightings.csv"
CSV_TEXT = "\n".join([HEADER, *SAMPLE_ROWS]) + "\n"


def settings_for(tmp_path: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "dataset_path": tmp_path / "ticks.csv",
        "cache_dir": tmp_path / "cache",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestEnsureCached:
    """Test URL caching with TTL."""

    def test_downloads_when_missing(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        with patch("tick_tracker.dataset.fetch_text", return_value=CSV_TEXT) as fetch:
            path = ensure_cached(URL, store, ttl_hours=1)
        fetch.assert_called_once_with(URL)
        assert path.read_text(encoding="utf-8") == CSV_TEXT
        assert store.is_fresh(CACHED_DATASET_PATH)

    def test_fresh_copy_reused(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write_text(
            CACHED_DATASET_PATH,
            CSV_TEXT,
            source=URL,
            valid_until=datetime.now(UTC) + timedelta(hours=1),
        )
        with patch("tick_tracker.dataset.fetch_text") as fetch:
            path = ensure_cached(URL, store, ttl_hours=1)
        fetch.assert_not_called()
        assert path == tmp_path / CACHED_DATASET_PATH

    def test_stale_copy_refetched(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write_text(
            CACHED_DATASET_PATH,
            HEADER + "\n",
            source=URL,
            valid_until=datetime.now(UTC) - timedelta(minutes=1),
        )
        with patch("tick_tracker.dataset.fetch_text", return_value=CSV_TEXT):
            path = ensure_cached(URL, store, ttl_hours=1)
        assert path.read_text(encoding="utf-8") == CSV_TEXT

    def test_download_failure_propagates(self, tmp_path: Path) -> None:
        with (
            patch(
                "tick_tracker.dataset.fetch_text",
                side_effect=DatasetUnavailableError("Could not download"),
            ),
            pytest.raises(DatasetUnavailableError),
        ):
            ensure_cached(URL, DataStore(tmp_path), ttl_hours=1)


class TestDatasetLocation:
    def test_local_path(self, tmp_path: Path) -> None:
        settings = settings_for(tmp_path)
        assert dataset_location(settings) == tmp_path / "ticks.csv"

    def test_url_goes_through_cache(self, tmp_path: Path) -> None:
        settings = settings_for(tmp_path, dataset_url=URL)
        with patch("tick_tracker.dataset.fetch_text", return_value=CSV_TEXT):
            location = dataset_location(settings)
        assert location == tmp_path / "cache" / CACHED_DATASET_PATH


class TestLoadStore:
    """Test loading the configured dataset."""

    def test_loads_local_file(self, tmp_path: Path) -> None:
        (tmp_path / "ticks.csv").write_text(CSV_TEXT, encoding="utf-8")
        store = load_store(settings_for(tmp_path))
        assert len(store) == 2
        assert store.stats.duplicate == 1

    def test_loads_url(self, tmp_path: Path) -> None:
        settings = settings_for(tmp_path, dataset_url=URL)
        with patch("tick_tracker.dataset.fetch_text", return_value=CSV_TEXT):
            assert {r.id for r in load_store(settings)} == {"1", "2"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetUnavailableError):
            load_store(settings_for(tmp_path))

    def test_uses_configured_zone(self, tmp_path: Path) -> None:
        (tmp_path / "ticks.csv").write_text(CSV_TEXT, encoding="utf-8")
        store = load_store(settings_for(tmp_path, timezone="America/New_York"))
        first = next(iter(store))
        assert first.timestamp.utcoffset() == timedelta(hours=-5)


class TestOpenDataset:
    def test_lazy_handle(self, tmp_path: Path) -> None:
        handle = open_dataset(settings_for(tmp_path))
        (tmp_path / "ticks.csv").write_text(CSV_TEXT, encoding="utf-8")
        assert len(handle.current) == 2

    def test_reload_rereads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "ticks.csv"
        path.write_text(CSV_TEXT, encoding="utf-8")
        handle = open_dataset(settings_for(tmp_path))
        assert len(handle.current) == 2

        path.write_text(CSV_TEXT + "9,2020-05-01T10:00:00,York,A,B\n", encoding="utf-8")
        assert len(handle.reload()) == 3
