"""Query engine over a loaded sighting store.

Pure functions: each takes already-loaded records and returns result models.

Dependency rule: analysis/ imports datasource *models* only. It never reads
files, fetches URLs or formats responses.

Modules:
  - window: inclusive date window + location filter
  - aggregate: region counts, species counts, hotspot intensity
  - buckets: monthly / ISO-weekly trend buckets
  - forecast: least-squares projection of monthly counts

Adding a query
--------------
1. Write a pure function in ``analysis/{name}.py`` that takes
   ``Iterable[SightingRecord]`` (the filtered subset) and returns a model
   from ``tick_tracker.schemas``.
2. Reuse ``aggregate.group_and_count`` with a key extractor instead of
   hand-rolling a dict of counters.
3. Expose it through ``services/queries.py`` and add a route in
   ``server.py``.
4. Add tests in ``tests/test_{name}.py``.
"""

from tick_tracker.analysis.aggregate import (
    group_and_count,
    hotspots,
    region_counts,
    species_counts,
)
from tick_tracker.analysis.buckets import MonthKey, WeekKey, bucket_counts
from tick_tracker.analysis.forecast import forecast_counts, parse_months_ahead
from tick_tracker.analysis.window import TimeWindow, filter_sightings, parse_query_date

__all__ = [
    "MonthKey",
    "TimeWindow",
    "WeekKey",
    "bucket_counts",
    "filter_sightings",
    "forecast_counts",
    "group_and_count",
    "hotspots",
    "parse_months_ahead",
    "parse_query_date",
    "region_counts",
    "species_counts",
]
