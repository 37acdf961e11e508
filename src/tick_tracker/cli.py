"""
Command-line interface for tick-tracker.

Subcommands load the configured dataset and either report on it (``info``,
``stats``, ``query``), refresh the download cache (``refresh``) or serve the
JSON API (``serve``).
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys

from tick_tracker import __version__
from tick_tracker.config import get_settings
from tick_tracker.dataset import open_dataset
from tick_tracker.errors import DatasetUnavailableError, QueryError
from tick_tracker.flows.refresh import refresh_dataset
from tick_tracker.server import create_server, dumps_json, to_jsonable
from tick_tracker.services.queries import SightingQueries

logger = logging.getLogger(__name__)

QUERY_KINDS = ("sightings", "regions", "trends", "species", "hotspots", "forecast")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="tick-tracker",
        description="Time-windowed queries and trend forecasts over tick sightings",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # 'refresh' command - download (if configured) and validate the dataset
    subparsers.add_parser("refresh", help="Refresh the dataset cache and report load stats")

    # 'stats' command - load once and print row statistics
    subparsers.add_parser("stats", help="Load the dataset and print load statistics")

    # 'query' command - run one query and print JSON
    query_parser = subparsers.add_parser("query", help="Run a query and print JSON")
    query_parser.add_argument("kind", choices=QUERY_KINDS, help="Query to run")
    query_parser.add_argument("--from", dest="from_date", required=True, help="YYYY-MM-DD")
    query_parser.add_argument("--to", dest="to_date", required=True, help="YYYY-MM-DD")
    query_parser.add_argument("--location", default=None, help="Region filter")
    query_parser.add_argument(
        "--granularity",
        default=None,
        help="monthly (default) or weekly, for 'trends'",
    )
    query_parser.add_argument(
        "--months-ahead",
        default=None,
        help="Forecast horizon 1-12 (default: 3), for 'forecast'",
    )

    # 'serve' command - run the HTTP API
    serve_parser = subparsers.add_parser("serve", help="Serve the query API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: api_port from settings)",
    )

    return parser


def configure_logging(debug: bool = False) -> None:
    settings = get_settings()
    level = logging.DEBUG if debug or settings.debug else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Dataset: {settings.dataset_url or settings.dataset_path}")
    print(f"Time zone: {settings.timezone}")
    print(f"Debug: {settings.debug}")
    return 0


def cmd_refresh(_args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: update the cache and validate a load."""
    settings = get_settings()
    try:
        refresh_dataset(url=settings.dataset_url)
    except DatasetUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print("Done.")
    return 0


def cmd_stats(_args: argparse.Namespace) -> int:
    """Handle the 'stats' command."""
    handle = open_dataset(get_settings())
    try:
        store = handle.current
    except DatasetUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    s = store.stats
    print(f"Rows read:                         {s.total}")
    print(f"Loaded sightings:                  {s.accepted}")
    print(f"Skipped (missing critical fields): {s.missing_critical}")
    print(f"Skipped (invalid dates):           {s.invalid_date}")
    print(f"Skipped (duplicates):              {s.duplicate}")
    print(f"Skipped (malformed):               {s.malformed}")
    print(f"Skipped (total):                   {s.skipped}")
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Handle the 'query' command: print one query result as JSON."""
    settings = get_settings()
    queries = SightingQueries(open_dataset(settings), settings.zone)

    try:
        if args.kind == "trends":
            result = queries.trends(args.from_date, args.to_date, args.granularity, args.location)
        elif args.kind == "forecast":
            result = queries.forecast(
                args.from_date, args.to_date, args.months_ahead, args.location
            )
        else:
            result = getattr(queries, args.kind)(args.from_date, args.to_date, args.location)
    except (QueryError, DatasetUnavailableError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(dumps_json(to_jsonable(result), indent=2))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: load the dataset then serve the API."""
    settings = get_settings()
    port = args.port if args.port is not None else settings.api_port

    handle = open_dataset(settings)
    try:
        handle.reload()
    except DatasetUnavailableError as exc:
        print(f"FATAL: {exc}", file=sys.stderr)
        return 1

    if hasattr(signal, "SIGHUP"):

        def _reload(_signum: int, _frame: object) -> None:
            try:
                handle.reload()
            except DatasetUnavailableError:
                logger.exception("Reload failed; keeping the current dataset")

        signal.signal(signal.SIGHUP, _reload)

    queries = SightingQueries(handle, settings.zone)
    with create_server(queries, settings.api_host, port) as server:
        print(f"Serving tick sightings on http://localhost:{port}/ (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")

    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.debug)

    commands = {
        "info": cmd_info,
        "refresh": cmd_refresh,
        "stats": cmd_stats,
        "query": cmd_query,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
