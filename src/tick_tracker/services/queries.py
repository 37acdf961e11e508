"""
Query operations exposed to the HTTP and CLI boundaries.

Each operation accepts the caller's raw parameter values (query-string
strings or None), validates them, filters the current dataset snapshot and
hands the subset to the matching analysis function. Invalid parameters raise
:class:`~tick_tracker.errors.QueryError` subclasses.

Usage::

    queries = SightingQueries(handle, zone=ZoneInfo("Europe/London"))
    queries.regions("2020-01-01", "2020-03-01")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tick_tracker.analysis import aggregate
from tick_tracker.analysis.buckets import bucket_counts
from tick_tracker.analysis.forecast import forecast_counts, parse_months_ahead
from tick_tracker.analysis.window import TimeWindow, filter_sightings
from tick_tracker.schemas import Granularity, LoadSummary, SightingOut

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from tick_tracker.datasources.sightings.handle import DatasetHandle
    from tick_tracker.datasources.sightings.models import SightingRecord
    from tick_tracker.schemas import (
        ForecastPoint,
        Hotspot,
        RegionCount,
        SpeciesCount,
        TrendPoint,
    )


def to_sighting_out(record: SightingRecord) -> SightingOut:
    return SightingOut(
        id=record.id,
        timestamp=record.timestamp.isoformat(),
        location=record.location,
        species=record.species,
        latin_name=record.latin_name,
    )


class SightingQueries:
    """The six windowed queries plus load statistics, bound to one dataset."""

    def __init__(self, handle: DatasetHandle, zone: ZoneInfo) -> None:
        self.handle = handle
        self.zone = zone

    def _subset(
        self,
        from_value: str | None,
        to_value: str | None,
        location: str | None,
    ) -> list[SightingRecord]:
        window = TimeWindow.from_params(from_value, to_value)
        return filter_sightings(self.handle.current, window, self.zone, location)

    def sightings(
        self,
        from_value: str | None,
        to_value: str | None,
        location: str | None = None,
    ) -> list[SightingOut]:
        """Matching sightings, oldest first."""
        subset = self._subset(from_value, to_value, location)
        subset.sort(key=lambda r: r.timestamp)
        return [to_sighting_out(r) for r in subset]

    def regions(
        self,
        from_value: str | None,
        to_value: str | None,
        location: str | None = None,
    ) -> list[RegionCount]:
        return aggregate.region_counts(self._subset(from_value, to_value, location))

    def species(
        self,
        from_value: str | None,
        to_value: str | None,
        location: str | None = None,
    ) -> list[SpeciesCount]:
        return aggregate.species_counts(self._subset(from_value, to_value, location))

    def hotspots(
        self,
        from_value: str | None,
        to_value: str | None,
        location: str | None = None,
    ) -> list[Hotspot]:
        return aggregate.hotspots(self._subset(from_value, to_value, location))

    def trends(
        self,
        from_value: str | None,
        to_value: str | None,
        granularity: str | None = None,
        location: str | None = None,
    ) -> list[TrendPoint]:
        subset = self._subset(from_value, to_value, location)
        return bucket_counts(subset, Granularity.parse(granularity))

    def forecast(
        self,
        from_value: str | None,
        to_value: str | None,
        months_ahead: str | int | None = None,
        location: str | None = None,
    ) -> list[ForecastPoint]:
        subset = self._subset(from_value, to_value, location)
        return forecast_counts(subset, parse_months_ahead(months_ahead))

    def stats(self) -> LoadSummary:
        """Load statistics of the active snapshot."""
        s = self.handle.current.stats
        return LoadSummary(
            accepted=s.accepted,
            missing_critical=s.missing_critical,
            invalid_date=s.invalid_date,
            duplicate=s.duplicate,
            malformed=s.malformed,
        )
