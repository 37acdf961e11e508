"""Read raw dataset lines from a local file or an HTTP(S) URL."""

from __future__ import annotations

from pathlib import Path

import requests

from tick_tracker.errors import DatasetUnavailableError
from tick_tracker.services.http import session


def is_url(location: str | Path) -> bool:
    return str(location).startswith(("http://", "https://"))


def read_lines(path: Path) -> list[str]:
    """
    Read every line of a local dataset file.

    Raises:
        DatasetUnavailableError: If the file cannot be opened or decoded.
    """
    try:
        with path.open(encoding="utf-8") as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Could not read dataset at {path}"
        raise DatasetUnavailableError(msg) from exc


def fetch_text(url: str) -> str:
    """
    Download a dataset over HTTP using the shared retrying session.

    Raises:
        DatasetUnavailableError: If the request fails after retries.
    """
    try:
        resp = session.get(url)
        resp.raise_for_status()
    except requests.RequestException as exc:
        msg = f"Could not download dataset from {url}"
        raise DatasetUnavailableError(msg) from exc
    resp.encoding = resp.encoding or "utf-8"
    return resp.text


def read_source(location: str | Path) -> list[str]:
    """Read dataset lines from either a URL or a file path."""
    if is_url(location):
        return fetch_text(str(location)).splitlines()
    return read_lines(Path(location))
