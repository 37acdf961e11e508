"""Build a deduplicated :class:`SightingStore` from dataset lines."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from tick_tracker.datasources.sightings.models import (
    LoadStats,
    Rejection,
    SightingRecord,
    SightingStore,
)
from tick_tracker.datasources.sightings.parser import parse_line

if TYPE_CHECKING:
    from collections.abc import Iterable
    from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


def load_sightings(lines: Iterable[str], zone: ZoneInfo) -> SightingStore:
    """
    Parse, validate and deduplicate dataset rows.

    The first line is always treated as a header and discarded. Later rows
    with a repeated ``id`` are rejected; the first occurrence wins.

    Args:
        lines: Raw dataset lines, header first.
        zone: Reference time zone for record timestamps.

    Returns:
        A new store holding accepted records in input order plus load stats.
    """
    rows = iter(lines)
    if next(rows, None) is None:
        logger.info("Dataset is empty.")
        return SightingStore()

    records: list[SightingRecord] = []
    index: dict[str, SightingRecord] = {}
    rejections: Counter[Rejection] = Counter()

    for line_no, line in enumerate(rows, start=2):
        outcome = parse_line(line, zone)
        if isinstance(outcome, SightingRecord):
            if outcome.id not in index:
                index[outcome.id] = outcome
                records.append(outcome)
                continue
            logger.warning("Skipping duplicate ID %s (line %d)", outcome.id, line_no)
            rejections[Rejection.DUPLICATE] += 1
            continue

        rejections[outcome] += 1
        _log_rejection(outcome, line, line_no)

    stats = LoadStats(
        accepted=len(records),
        missing_critical=rejections[Rejection.MISSING_CRITICAL_FIELD],
        invalid_date=rejections[Rejection.INVALID_DATE],
        duplicate=rejections[Rejection.DUPLICATE],
        malformed=rejections[Rejection.MALFORMED],
    )
    logger.info(
        "Dataset load complete: %d loaded, %d missing critical fields, "
        "%d invalid dates, %d duplicates, %d malformed",
        stats.accepted,
        stats.missing_critical,
        stats.invalid_date,
        stats.duplicate,
        stats.malformed,
    )
    return SightingStore(records=tuple(records), stats=stats)


def _log_rejection(reason: Rejection, line: str, line_no: int) -> None:
    if reason is Rejection.MISSING_CRITICAL_FIELD:
        logger.warning("Skipping row %d (missing ID or date): %s", line_no, line.rstrip("\r\n"))
    elif reason is Rejection.INVALID_DATE:
        logger.warning("Skipping row %d with invalid date: %s", line_no, line.rstrip("\r\n"))
    elif reason is Rejection.MALFORMED:
        logger.debug("Skipping incomplete row %d", line_no)
