"""Sighting data models and constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

# Placeholder region for rows with a blank location
UNKNOWN_LOCATION = "UNKNOWN"

# Column order of the delimited dataset
FIELD_COUNT = 5
DELIMITER = ","


class Rejection(StrEnum):
    """Why a dataset row was not stored."""

    MALFORMED = "malformed"
    MISSING_CRITICAL_FIELD = "missing-critical-field"
    INVALID_DATE = "invalid-date"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class SightingRecord:
    """A single tick sighting, immutable once loaded."""

    id: str
    timestamp: datetime
    location: str
    species: str
    latin_name: str


@dataclass(frozen=True)
class LoadStats:
    """Row counts from one dataset load (header excluded)."""

    accepted: int = 0
    missing_critical: int = 0
    invalid_date: int = 0
    duplicate: int = 0
    malformed: int = 0

    @property
    def skipped(self) -> int:
        return self.missing_critical + self.invalid_date + self.duplicate + self.malformed

    @property
    def total(self) -> int:
        """Number of data rows seen."""
        return self.accepted + self.skipped


@dataclass(frozen=True)
class SightingStore:
    """Deduplicated sightings in input-row order, with their load stats.

    The store never changes after construction. Consumers must not rely on
    the order of ``records``; sort explicitly where order matters.
    """

    records: tuple[SightingRecord, ...] = ()
    stats: LoadStats = field(default_factory=LoadStats)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[SightingRecord]:
        return iter(self.records)
