"""
Result models returned by the query service.

Pydantic models whose aliases are the JSON field names clients see
(``latinName``, ``periodLabel``...). Build them with the Python field names
and serialize with ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class _ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# =============================================================================
# Sightings
# =============================================================================


class SightingOut(_ResultModel):
    """A stored sighting as listed to clients."""

    id: str
    timestamp: str  # ISO-8601 with offset
    location: str
    species: str
    latin_name: str = Field(alias="latinName")


class LoadSummary(_ResultModel):
    """Load statistics for the active dataset snapshot."""

    accepted: int
    missing_critical: int = Field(alias="missingCritical")
    invalid_date: int = Field(alias="invalidDate")
    duplicate: int
    malformed: int


# =============================================================================
# Aggregates
# =============================================================================


class RegionCount(_ResultModel):
    region: str
    count: int


class SpeciesCount(_ResultModel):
    species: str
    latin_name: str = Field(alias="latinName")
    count: int


class Hotspot(_ResultModel):
    """Region count normalized to the busiest region (0-1, three decimals)."""

    region: str
    count: int
    intensity: Decimal = Field(..., ge=0, le=1)


# =============================================================================
# Trends
# =============================================================================


class Granularity(StrEnum):
    """Time bucket size for trend output."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"

    @classmethod
    def parse(cls, value: str | None) -> Granularity:
        """Case-insensitive lookup; anything unrecognized is monthly."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.MONTHLY


class TrendPoint(_ResultModel):
    period_label: str = Field(alias="periodLabel")
    count: int


class ForecastPoint(_ResultModel):
    period_label: str = Field(alias="periodLabel")
    predicted_count: int = Field(alias="predictedCount", ge=0)
