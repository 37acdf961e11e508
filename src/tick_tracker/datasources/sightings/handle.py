"""Owner of the current dataset snapshot.

Readers take ``handle.current`` once per request and work on that store; a
reload builds the replacement outside the lock and only swaps the reference
inside it, so no reader ever sees a partially loaded store.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from tick_tracker.datasources.sightings.models import SightingStore

logger = logging.getLogger(__name__)


class DatasetHandle:
    """Holds the active :class:`SightingStore` and replaces it atomically."""

    def __init__(self, loader: Callable[[], SightingStore]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._store: SightingStore | None = None

    @property
    def current(self) -> SightingStore:
        """The active store, loading it on first access."""
        store = self._store
        if store is None:
            return self.reload()
        return store

    def reload(self) -> SightingStore:
        """
        Load a fresh store and install it.

        If loading fails the previous snapshot stays active and the error
        propagates to the caller.
        """
        store = self._loader()
        with self._lock:
            self._store = store
        logger.info("Installed dataset snapshot with %d sightings", len(store))
        return store
