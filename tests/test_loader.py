"""Tests for dataset loading, dedup and the snapshot handle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest
import requests

from conftest import HEADER, SAMPLE_ROWS
from tick_tracker.datasources.sightings import (
    DatasetHandle,
    LoadStats,
    SightingStore,
    load_sightings,
    read_source,
    source,
)
from tick_tracker.errors import DatasetUnavailableError

if TYPE_CHECKING:
    from pathlib import Path
    from zoneinfo import ZoneInfo


class TestLoadSightings:
    """Test building a store from raw lines."""

    def test_duplicate_id_keeps_first(self, london: ZoneInfo) -> None:
        store = load_sightings([HEADER, *SAMPLE_ROWS], london)

        assert len(store) == 2
        assert {r.id for r in store} == {"1", "2"}
        first = next(r for r in store if r.id == "1")
        assert first.location == "London"
        assert first.timestamp.month == 1
        assert store.stats.duplicate == 1
        assert store.stats.accepted == 2

    def test_header_always_discarded(self, london: ZoneInfo) -> None:
        # A header that looks like data is still skipped
        store = load_sightings(["9,2020-01-01T00:00:00,York,A,B", SAMPLE_ROWS[0]], london)
        assert {r.id for r in store} == {"1"}

    def test_empty_source(self, london: ZoneInfo) -> None:
        store = load_sightings([], london)
        assert len(store) == 0
        assert store.stats == LoadStats()

    def test_header_only(self, london: ZoneInfo) -> None:
        store = load_sightings([HEADER], london)
        assert len(store) == 0
        assert store.stats.total == 0

    def test_counts_each_rejection(self, london: ZoneInfo) -> None:
        lines = [
            HEADER,
            "1,2020-01-15T10:00:00,London,A,B",
            "2,2020-01-15T10:00:00,London",  # malformed
            ",2020-01-15T10:00:00,London,A,B",  # missing id
            "3,,London,A,B",  # missing date
            "4,15/01/2020,London,A,B",  # invalid date
            "1,2020-02-15T10:00:00,Leeds,A,B",  # duplicate
            "5,2020-03-15T10:00:00,,A,B",
        ]
        stats = load_sightings(lines, london).stats

        assert stats == LoadStats(
            accepted=2, missing_critical=2, invalid_date=1, duplicate=1, malformed=1
        )
        assert stats.skipped == 5
        assert stats.total == 7

    def test_invalid_date_on_repeated_id_counts_as_invalid_date(self, london: ZoneInfo) -> None:
        lines = [HEADER, "1,2020-01-15T10:00:00,London,A,B", "1,bad,London,A,B"]
        stats = load_sightings(lines, london).stats
        assert stats.invalid_date == 1
        assert stats.duplicate == 0

    def test_preserves_input_order(self, london: ZoneInfo) -> None:
        lines = [
            HEADER,
            "b,2020-03-01T00:00:00,X,A,B",
            "a,2020-01-01T00:00:00,X,A,B",
            "c,2020-02-01T00:00:00,X,A,B",
        ]
        store = load_sightings(lines, london)
        assert [r.id for r in store] == ["b", "a", "c"]

    def test_reload_is_idempotent(self, london: ZoneInfo) -> None:
        lines = [HEADER, *SAMPLE_ROWS, "x,bad,London,A,B", "short"]
        first = load_sightings(lines, london)
        second = load_sightings(lines, london)
        assert first.records == second.records
        assert first.stats == second.stats

    def test_logs_rejections(self, london: ZoneInfo, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="tick_tracker.datasources.sightings.loader"):
            load_sightings([HEADER, *SAMPLE_ROWS, "2,nope,York,A,B"], london)

        messages = caplog.text
        assert "Skipping duplicate ID 1" in messages
        assert "invalid date" in messages
        assert "Dataset load complete: 2 loaded" in messages


class TestReadSource:
    """Test reading dataset lines from files and URLs."""

    def test_reads_file(self, sample_csv: Path) -> None:
        lines = read_source(sample_csv)
        assert lines[0] == HEADER
        assert lines[1:] == SAMPLE_ROWS

    def test_missing_file_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetUnavailableError):
            read_source(tmp_path / "missing.csv")

    def test_reads_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        response = Mock()
        response.text = f"{HEADER}\r\n{SAMPLE_ROWS[0]}\r\n"
        response.encoding = "utf-8"
        get = Mock(return_value=response)
        monkeypatch.setattr(source.session, "get", get)

        lines = read_source("https://example.org/ticks.csv")

        get.assert_called_once_with("https://example.org/ticks.csv")
        assert lines == [HEADER, SAMPLE_ROWS[0]]

    def test_http_error_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404")
        monkeypatch.setattr(source.session, "get", Mock(return_value=response))

        with pytest.raises(DatasetUnavailableError):
            read_source("https://example.org/missing.csv")


class TestDatasetHandle:
    """Test snapshot ownership and atomic reload."""

    def test_lazy_first_load(self, london: ZoneInfo) -> None:
        calls: list[int] = []

        def loader() -> SightingStore:
            calls.append(1)
            return load_sightings([HEADER, *SAMPLE_ROWS], london)

        handle = DatasetHandle(loader)
        assert calls == []
        assert len(handle.current) == 2
        assert len(handle.current) == 2
        assert calls == [1]

    def test_reload_swaps_snapshot(self, london: ZoneInfo) -> None:
        datasets = [[HEADER, SAMPLE_ROWS[0]], [HEADER, *SAMPLE_ROWS]]
        handle = DatasetHandle(lambda: load_sightings(datasets.pop(0), london))

        old = handle.current
        new = handle.reload()

        assert handle.current is new
        assert len(old) == 1
        assert len(new) == 2

    def test_failed_reload_keeps_previous(self, london: ZoneInfo) -> None:
        stores = iter([load_sightings([HEADER, *SAMPLE_ROWS], london)])

        def loader() -> SightingStore:
            try:
                return next(stores)
            except StopIteration:
                raise DatasetUnavailableError("gone") from None

        handle = DatasetHandle(loader)
        before = handle.current

        with pytest.raises(DatasetUnavailableError):
            handle.reload()
        assert handle.current is before
