"""
JSON-over-HTTP boundary for the sighting queries.

Routes (GET only; other methods, HEAD included, get a 405)::

    /sightings  ?from&to[&location]                 -> [SightingOut]
    /regions    ?from&to[&location]                 -> [RegionCount]
    /trends     ?from&to[&granularity][&location]   -> [TrendPoint]
    /species    ?from&to[&location]                 -> [SpeciesCount]
    /hotspots   ?from&to[&location]                 -> [Hotspot]
    /forecast   ?from&to[&monthsAhead][&location]   -> [ForecastPoint]
    /health                                         -> {"status", "sightings"}
    /stats                                          -> LoadSummary

Query errors become 400, other failures 500, both with a
``{"status": <code>, "error": <message>}`` body.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from decimal import Decimal
from functools import partial
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel

from tick_tracker.errors import QueryError

if TYPE_CHECKING:
    from collections.abc import Callable

    from tick_tracker.services.queries import SightingQueries

logger = logging.getLogger(__name__)

Params = dict[str, str]


def parse_query(query: str) -> Params:
    """Decode a query string; later duplicates win, bare keys map to ``""``."""
    return dict(parse_qsl(query, keep_blank_values=True))


ROUTES: dict[str, Callable[[SightingQueries, Params], Any]] = {
    "/sightings": lambda q, p: q.sightings(p.get("from"), p.get("to"), p.get("location")),
    "/regions": lambda q, p: q.regions(p.get("from"), p.get("to"), p.get("location")),
    "/trends": lambda q, p: q.trends(
        p.get("from"), p.get("to"), p.get("granularity"), p.get("location")
    ),
    "/species": lambda q, p: q.species(p.get("from"), p.get("to"), p.get("location")),
    "/hotspots": lambda q, p: q.hotspots(p.get("from"), p.get("to"), p.get("location")),
    "/forecast": lambda q, p: q.forecast(
        p.get("from"), p.get("to"), p.get("monthsAhead"), p.get("location")
    ),
    "/health": lambda q, _p: {"status": "ok", "sightings": len(q.handle.current)},
    "/stats": lambda q, _p: q.stats(),
}


def to_jsonable(result: Any) -> Any:
    """Serialize result models with their client-facing aliases.

    Decimal fields stay :class:`~decimal.Decimal` so :func:`dumps_json` can
    write them with their exact scale.
    """
    if isinstance(result, BaseModel):
        return result.model_dump(by_alias=True)
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


def dumps_json(body: Any, indent: int | None = None) -> str:
    """``json.dumps`` that writes decimals as bare numbers (``1.000``, not ``1.0``)."""
    marker = uuid.uuid4().hex
    literals: dict[str, str] = {}

    def encode_decimal(value: Any) -> str:
        if not isinstance(value, Decimal):
            raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
        token = f"{marker}:{len(literals)}"
        literals[token] = str(value)
        return token

    text = json.dumps(body, indent=indent, default=encode_decimal)
    if not literals:
        return text
    return re.sub(f'"({marker}:\\d+)"', lambda m: literals[m[1]], text)


class SightingsRequestHandler(BaseHTTPRequestHandler):
    """Dispatches GET requests to :data:`ROUTES`."""

    server_version = "tick-tracker"

    def __init__(self, *args: Any, queries: SightingQueries, **kwargs: Any) -> None:
        self.queries = queries
        super().__init__(*args, **kwargs)

    def do_GET(self) -> None:  # noqa: N802
        url = urlsplit(self.path)
        route = ROUTES.get(url.path.rstrip("/") or "/")
        if route is None:
            self.send_error_json(HTTPStatus.NOT_FOUND, "Not found.")
            return

        try:
            result = route(self.queries, parse_query(url.query))
        except QueryError as exc:
            self.send_error_json(HTTPStatus.BAD_REQUEST, str(exc))
            return
        except Exception:
            logger.exception("Unexpected error handling %s", self.path)
            self.send_error_json(HTTPStatus.INTERNAL_SERVER_ERROR, "Unexpected server error.")
            return

        self.send_json(HTTPStatus.OK, to_jsonable(result))

    def _method_not_allowed(self) -> None:
        self.send_error_json(HTTPStatus.METHOD_NOT_ALLOWED, "Only GET is allowed on this endpoint.")

    do_HEAD = do_OPTIONS = _method_not_allowed  # noqa: N815
    do_POST = do_PUT = do_PATCH = do_DELETE = _method_not_allowed  # noqa: N815

    def send_json(self, status: HTTPStatus, body: Any) -> None:
        payload = dumps_json(body).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    def send_error_json(self, status: HTTPStatus, message: str) -> None:
        self.send_json(status, {"status": int(status), "error": message})

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.info("%s - %s", self.address_string(), format % args)


def create_server(queries: SightingQueries, host: str = "", port: int = 8080) -> ThreadingHTTPServer:
    """Build a threaded server bound to ``(host, port)`` serving ``queries``."""
    handler = partial(SightingsRequestHandler, queries=queries)
    return ThreadingHTTPServer((host, port), handler)
