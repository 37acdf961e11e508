"""Calendar-month and ISO-week bucketing for trend output.

Bucket keys are small named tuples, so equality and chronological ordering
come from tuple comparison (year first, then month or week).
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, NamedTuple

from tick_tracker.analysis.aggregate import group_and_count
from tick_tracker.schemas import Granularity, TrendPoint

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tick_tracker.datasources.sightings.models import SightingRecord


class MonthKey(NamedTuple):
    """A calendar month, e.g. ``2020-01``."""

    year: int
    month: int

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def plus_months(self, months: int) -> MonthKey:
        """The month ``months`` after this one."""
        total = self.year * 12 + (self.month - 1) + months
        return MonthKey(total // 12, total % 12 + 1)


class WeekKey(NamedTuple):
    """An ISO-8601 week: Monday start, week 1 holds the first Thursday.

    ``year`` is the week-based year, which differs from the calendar year for
    some days around New Year (2021-01-01 falls in ``2020-W53``).
    """

    year: int
    week: int

    @property
    def label(self) -> str:
        return f"{self.year}-W{self.week}"


def month_key(record: SightingRecord) -> MonthKey:
    return MonthKey(record.timestamp.year, record.timestamp.month)


def week_key(record: SightingRecord) -> WeekKey:
    iso = record.timestamp.isocalendar()
    return WeekKey(iso.year, iso.week)


def monthly_counts(records: Iterable[SightingRecord]) -> Counter[MonthKey]:
    return group_and_count(records, month_key)


def weekly_counts(records: Iterable[SightingRecord]) -> Counter[WeekKey]:
    return group_and_count(records, week_key)


def bucket_counts(
    records: Iterable[SightingRecord],
    granularity: Granularity = Granularity.MONTHLY,
) -> list[TrendPoint]:
    """
    Count sightings per time bucket, oldest bucket first.

    Buckets with no sightings are left out rather than zero-filled.

    Args:
        records: Filtered sightings (timestamps already in the reference zone).
        granularity: Monthly or weekly buckets.

    Returns:
        One TrendPoint per non-empty bucket.
    """
    counts: Counter[MonthKey] | Counter[WeekKey]
    if granularity is Granularity.WEEKLY:
        counts = weekly_counts(records)
    else:
        counts = monthly_counts(records)

    return [TrendPoint(period_label=key.label, count=counts[key]) for key in sorted(counts)]
