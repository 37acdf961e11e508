"""Tick sighting dataset: parsing, loading and the live snapshot.

Public API:
  - models: SightingRecord, SightingStore, LoadStats, Rejection
  - parser: parse_line, normalize_location
  - loader: load_sightings
  - source: read_source (file path or URL)
  - handle: DatasetHandle (atomic reload)
"""

from tick_tracker.datasources.sightings.handle import DatasetHandle
from tick_tracker.datasources.sightings.loader import load_sightings
from tick_tracker.datasources.sightings.models import (
    UNKNOWN_LOCATION,
    LoadStats,
    Rejection,
    SightingRecord,
    SightingStore,
)
from tick_tracker.datasources.sightings.parser import normalize_location, parse_line
from tick_tracker.datasources.sightings.source import read_source

__all__ = [
    "UNKNOWN_LOCATION",
    "DatasetHandle",
    "LoadStats",
    "Rejection",
    "SightingRecord",
    "SightingStore",
    "load_sightings",
    "normalize_location",
    "parse_line",
    "read_source",
]
