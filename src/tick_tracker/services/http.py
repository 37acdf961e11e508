"""
HTTP session for downloading remote sighting datasets.

Dataset exports are plain CSV served over HTTP(S). Downloads go through a
``requests`` session that retries transient failures (connection resets,
429/502/503/504) with exponential backoff and never waits forever, because
the server cannot start until the first load finishes.

Usage::

    from tick_tracker.services.http import session

    resp = session.get("https://example.org/tick_sightings.csv")
    resp.raise_for_status()
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tick_tracker import __version__

DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,  # 0s, 2s, 4s, 8s
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    raise_on_status=False,
)

DEFAULT_TIMEOUT = 30  # seconds

USER_AGENT = f"tick-tracker/{__version__}"

ACCEPT = "text/csv, text/plain;q=0.9, */*;q=0.1"


class DatasetSession(requests.Session):
    """Session that fills in ``timeout`` on every request that omits it."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__()
        self.default_timeout = timeout

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.default_timeout
        return super().send(request, **kwargs)


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> DatasetSession:
    """
    Build a download session with the retry adapter mounted on both schemes.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Seconds to wait when a caller does not pass ``timeout=``.
    """
    s = DatasetSession(timeout)
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    for scheme in ("https://", "http://"):
        s.mount(scheme, adapter)
    s.headers.update({"User-Agent": USER_AGENT, "Accept": ACCEPT})
    return s


session: DatasetSession = create_session()
