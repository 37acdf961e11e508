"""Parse raw dataset rows into sighting records.

Rows look like ``id,date-time,location,species,latinName``. Splitting is a
plain comma split: quoted fields containing commas are not supported.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING

from tick_tracker.datasources.sightings.models import (
    DELIMITER,
    FIELD_COUNT,
    UNKNOWN_LOCATION,
    Rejection,
    SightingRecord,
)

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

# ISO-8601 date-time with optional offset and, after an offset, an optional
# bracketed zone id ("...+01:00[Europe/Paris]"); a bare date is not accepted
_ISO_DATE_TIME = re.compile(
    r"^(?P<local>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,9})?)?)"
    r"((Z|[+-]\d{2}:\d{2})(\[[^\]]+\])?)?$"
)

ParseOutcome = SightingRecord | Rejection


def split_row(raw_line: str) -> list[str]:
    """Split a row on the delimiter, keeping empty trailing fields."""
    return raw_line.rstrip("\r\n").split(DELIMITER)


def normalize_location(raw: str | None) -> str:
    """Trim a location label, mapping blank values to ``UNKNOWN``."""
    if raw is None or not raw.strip():
        return UNKNOWN_LOCATION
    return raw.strip()


def parse_timestamp(value: str, zone: ZoneInfo) -> datetime | None:
    """Parse an ISO date-time as wall-clock time in the reference zone.

    Only the local date and time fields are kept: an offset or bracketed
    zone id is validated for shape and then discarded, so
    ``2020-01-31T23:30:00-05:00`` stays on 31 January. Returns None when the
    value is not a well-formed date-time.
    """
    match = _ISO_DATE_TIME.match(value)
    if match is None:
        return None
    try:
        parsed = datetime.fromisoformat(match["local"])
    except ValueError:
        return None
    return parsed.replace(tzinfo=zone)


def parse_line(raw_line: str, zone: ZoneInfo) -> ParseOutcome:
    """Turn one dataset row into a :class:`SightingRecord` or a :class:`Rejection`.

    Args:
        raw_line: A single data row (header already removed).
        zone: Reference time zone for the timestamp.

    Returns:
        The parsed record, or the reason the row was rejected. Duplicate
        detection is the loader's job, so ``Rejection.DUPLICATE`` is never
        returned here.
    """
    parts = split_row(raw_line)
    if len(parts) < FIELD_COUNT:
        return Rejection.MALFORMED

    sighting_id = parts[0].strip()
    date_str = parts[1].strip()
    if not sighting_id or not date_str:
        return Rejection.MISSING_CRITICAL_FIELD

    timestamp = parse_timestamp(date_str, zone)
    if timestamp is None:
        return Rejection.INVALID_DATE

    return SightingRecord(
        id=sighting_id,
        timestamp=timestamp,
        location=normalize_location(parts[2]),
        species=parts[3].strip(),
        latin_name=parts[4].strip(),
    )
