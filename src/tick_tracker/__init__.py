"""Tick Tracker - time-windowed queries and trend forecasts over tick sightings.

Architecture::

    datasources/   Dataset parsing, validation, dedup and the live snapshot
    analysis/      Window filter, aggregation, time buckets, forecasting
    services/      Query operations over the snapshot; retrying HTTP client
    store.py       Download cache with TTL sidecars
    dataset.py     Settings -> dataset source -> DatasetHandle
    flows/         Prefect orchestration (refresh + validate the dataset)
    server.py      JSON HTTP API
    cli.py         ``tick-tracker`` command

Data flow: source (file/URL) -> datasources (parse, dedup) -> snapshot ->
analysis (per request) -> schemas -> server/cli
"""

__version__ = "0.1.0"

from tick_tracker.config import Settings

__all__ = ["Settings", "__version__"]
