"""Linear trend projection of monthly sighting counts.

Fits ordinary least squares to ``(index, count)`` where ``index`` is the
position of each *observed* month in chronological order. Months with no
sightings do not get an index, so a gap in the data is treated as if the
surrounding months were consecutive. This understates elapsed time when the
series has holes; it is a known modeling simplification, kept for
compatibility with existing forecasts.
"""

from __future__ import annotations

import math
import statistics
from typing import TYPE_CHECKING

from tick_tracker.analysis.buckets import monthly_counts
from tick_tracker.errors import InsufficientDataError
from tick_tracker.schemas import ForecastPoint

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tick_tracker.datasources.sightings.models import SightingRecord

DEFAULT_MONTHS_AHEAD = 3
MIN_MONTHS_AHEAD = 1
MAX_MONTHS_AHEAD = 12
MIN_OBSERVED_MONTHS = 2


def parse_months_ahead(value: str | int | None) -> int:
    """Clamp a requested horizon to 1-12 months; unparsable input gives 3."""
    if value is None:
        return DEFAULT_MONTHS_AHEAD
    try:
        months = int(value)
    except (TypeError, ValueError):
        return DEFAULT_MONTHS_AHEAD
    return max(MIN_MONTHS_AHEAD, min(MAX_MONTHS_AHEAD, months))


def fit_line(ys: Sequence[float]) -> tuple[float, float]:
    """
    Least-squares ``(slope, intercept)`` for points ``(i, ys[i])``.

    A single point gives a flat line through it; no points give ``(0, 0)``.
    """
    if not ys:
        return 0.0, 0.0
    if len(ys) == 1:
        return 0.0, float(ys[0])
    slope, intercept = statistics.linear_regression(range(len(ys)), ys)
    return float(slope), float(intercept)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def forecast_counts(
    records: Iterable[SightingRecord],
    months_ahead: int = DEFAULT_MONTHS_AHEAD,
) -> list[ForecastPoint]:
    """
    Project monthly sighting counts past the last observed month.

    Args:
        records: Filtered sightings.
        months_ahead: Horizon in months; clamped to 1-12.

    Returns:
        One ForecastPoint per future month, nearest first. Predictions are
        floored at zero and rounded half-up.

    Raises:
        InsufficientDataError: Fewer than two distinct months observed.
    """
    months_ahead = parse_months_ahead(months_ahead)
    counts = monthly_counts(records)
    months = sorted(counts)
    if len(months) < MIN_OBSERVED_MONTHS:
        raise InsufficientDataError(len(months))

    slope, intercept = fit_line([counts[m] for m in months])
    n = len(months)
    last = months[-1]

    points: list[ForecastPoint] = []
    for k in range(1, months_ahead + 1):
        predicted = max(0.0, intercept + slope * (n - 1 + k))
        points.append(
            ForecastPoint(
                period_label=last.plus_months(k).label,
                predicted_count=round_half_up(predicted),
            )
        )
    return points
