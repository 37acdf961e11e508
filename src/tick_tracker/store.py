"""On-disk cache for downloaded datasets, with freshness metadata.

Files live under a base dir; downloaded copies go in its ``live/`` tier and
are refreshed after ``cache_ttl_hours``.

The data file keeps its native format (CSV text) and freshness metadata
lives alongside it in a ``.meta.json`` sidecar holding ``source``,
``fetched_at`` and ``valid_until``. The refresh flow uses :meth:`is_fresh`
to skip downloads that are still valid.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003
from typing import Any


class DataStore:
    """Reads and writes cached dataset files with TTL sidecars."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir

    def write_text(
        self,
        path: Path,
        text: str,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Store a text file and its sidecar metadata.

        Args:
            path: Relative path under base_dir (e.g. ``live/tick_sightings.csv``).
            text: File contents.
            source: Where the contents came from (URL or path).
            valid_until: Expiry timestamp. None means never fresh.
            **params: Extra metadata fields (row counts, etc.).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(text, encoding="utf-8")

        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        if params:
            meta.update(params)

        with self._meta_path(full).open("w") as f:
            json.dump({"meta": meta}, f, indent=2)

        return full

    def read_meta(self, path: Path) -> dict[str, Any]:
        """Sidecar metadata for a stored file (empty if none)."""
        meta_path = self._meta_path(self._resolve(path))
        if not meta_path.exists():
            return {}
        with meta_path.open() as f:
            result: dict[str, Any] = json.load(f)
        return result.get("meta", {})

    def is_fresh(self, path: Path) -> bool:
        """Check if a file exists and hasn't expired.

        Returns False if the file is missing, has no ``valid_until``, or
        the expiry time has passed.
        """
        full = self._resolve(path)
        if not full.exists():
            return False

        valid_until = self.read_meta(path).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full

    @staticmethod
    def _meta_path(full: Path) -> Path:
        return full.with_suffix(full.suffix + ".meta.json")
