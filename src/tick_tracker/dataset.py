"""Wire configuration to a loaded dataset.

Resolves where the dataset comes from (local path, or a URL cached through
:class:`~tick_tracker.store.DataStore`) and builds the
:class:`~tick_tracker.datasources.sightings.DatasetHandle` the server and CLI
query against.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from tick_tracker.datasources.sightings import DatasetHandle, load_sightings, read_source
from tick_tracker.datasources.sightings.source import fetch_text
from tick_tracker.store import DataStore

if TYPE_CHECKING:
    from tick_tracker.config import Settings
    from tick_tracker.datasources.sightings.models import SightingStore

logger = logging.getLogger(__name__)

CACHED_DATASET_PATH = Path("live/tick_sightings.csv")


def save_to_cache(text: str, url: str, store: DataStore, ttl_hours: int) -> Path:
    """Write downloaded dataset text into the live tier, valid for ``ttl_hours``."""
    return store.write_text(
        CACHED_DATASET_PATH,
        text,
        source=url,
        valid_until=datetime.now(UTC) + timedelta(hours=ttl_hours),
        lines=len(text.splitlines()),
    )


def ensure_cached(url: str, store: DataStore, ttl_hours: int) -> Path:
    """Return the cached copy of ``url``, downloading it if stale or missing."""
    if store.is_fresh(CACHED_DATASET_PATH):
        logger.debug("Cached dataset is fresh, skipping download.")
        return store.base / CACHED_DATASET_PATH
    logger.info("Downloading dataset from %s", url)
    return save_to_cache(fetch_text(url), url, store, ttl_hours)


def dataset_location(settings: Settings, store: DataStore | None = None) -> Path:
    """Local file to load: the URL cache when a URL is set, else ``dataset_path``."""
    if settings.dataset_url:
        store = store or DataStore(settings.cache_dir)
        return ensure_cached(settings.dataset_url, store, settings.cache_ttl_hours)
    return settings.dataset_path


def load_store(settings: Settings) -> SightingStore:
    """Read and load the configured dataset.

    Raises:
        DatasetUnavailableError: The source could not be read.
    """
    location = dataset_location(settings)
    logger.info("Loading data from: %s", location)
    return load_sightings(read_source(location), settings.zone)


def open_dataset(settings: Settings) -> DatasetHandle:
    """Handle whose reloads re-read the configured source."""
    return DatasetHandle(lambda: load_store(settings))
