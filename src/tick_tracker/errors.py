"""Exception types raised by the query engine and dataset loader.

Per-request failures derive from :class:`QueryError`; the boundary layer maps
them to client errors. Row-level load problems are never raised, they are
reported as :class:`~tick_tracker.datasources.sightings.models.Rejection`
values instead.
"""

from __future__ import annotations


class TickTrackerError(Exception):
    """Base class for all tick-tracker errors."""


class QueryError(TickTrackerError):
    """A query could not be answered with the given parameters."""


class MissingParameterError(QueryError):
    """A required date parameter is absent or not a ``YYYY-MM-DD`` date."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        super().__init__("Parameters 'from' and 'to' (YYYY-MM-DD) are required.")


class InvalidRangeError(QueryError):
    """The window end date is earlier than its start date."""

    def __init__(self) -> None:
        super().__init__("'to' must not be before 'from'.")


class InsufficientDataError(QueryError):
    """Too few observed months in the window to fit a trend."""

    def __init__(self, months: int) -> None:
        self.months = months
        super().__init__(
            "Not enough data to generate a forecast (need at least 2 months)."
        )


class DatasetUnavailableError(TickTrackerError):
    """The dataset source could not be read at all."""
