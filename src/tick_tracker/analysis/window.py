"""Inclusive date-window and location filtering over a sighting store."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

from tick_tracker.errors import InvalidRangeError, MissingParameterError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from zoneinfo import ZoneInfo

    from tick_tracker.datasources.sightings.models import SightingRecord

_CALENDAR_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_query_date(value: str | None) -> date | None:
    """Parse a caller-supplied ``YYYY-MM-DD`` date.

    Blank, absent or otherwise malformed values give None.
    """
    if value is None:
        return None
    value = value.strip()
    if not _CALENDAR_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class TimeWindow:
    """An inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidRangeError

    @classmethod
    def from_params(cls, from_value: str | None, to_value: str | None) -> TimeWindow:
        """Build a window from raw ``from``/``to`` query values.

        Raises:
            MissingParameterError: Either date is absent or unparsable.
            InvalidRangeError: ``to`` is before ``from``.
        """
        start = parse_query_date(from_value)
        if start is None:
            raise MissingParameterError("from")
        end = parse_query_date(to_value)
        if end is None:
            raise MissingParameterError("to")
        return cls(start, end)

    def bounds(self, zone: ZoneInfo) -> tuple[datetime, datetime]:
        """Half-open ``[start 00:00, end+1 00:00)`` bounds in ``zone``."""
        lower = datetime.combine(self.start, time.min, tzinfo=zone)
        upper = datetime.combine(self.end + timedelta(days=1), time.min, tzinfo=zone)
        return lower, upper


def filter_sightings(
    records: Iterable[SightingRecord],
    window: TimeWindow,
    zone: ZoneInfo,
    location: str | None = None,
) -> list[SightingRecord]:
    """
    Select sightings inside ``window``, optionally restricted to one location.

    The whole ``window.end`` day is included. Location matching ignores case;
    a blank location applies no filter. The result has no guaranteed order.

    Args:
        records: Sightings to filter (usually a ``SightingStore``).
        window: Inclusive calendar-day range.
        zone: Reference time zone the day boundaries are drawn in.
        location: Optional region label.

    Returns:
        The matching sightings.
    """
    lower, upper = window.bounds(zone)
    wanted = location.strip().casefold() if location and location.strip() else None

    return [
        r
        for r in records
        if lower <= r.timestamp < upper
        and (wanted is None or r.location.casefold() == wanted)
    ]
