"""CLI entry point for the professional search engine."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from src.core.config import Settings
from src.core.db import init_db
from src.core.schemas import RankingMode, SearchGroup
from src.geo.cache import SqliteCacheStore
from src.geo.distance import format_distance
from src.geo.geocoder import NominatimGeocoder
from src.geo.service import GeodistanceService
from src.pipeline.codec import decode_career, decode_work_history
from src.pipeline.orchestrator import SearchEngine, export_results_json
from src.roster.json_source import JsonRosterSource


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Professional search engine - fuzzy search and rank a roster of professionals",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- search subcommand ---
    search_parser = subparsers.add_parser("search", help="Search and rank professionals")
    search_parser.add_argument(
        "--roster",
        required=True,
        help="Path to a JSON file with the roster of professionals",
    )
    search_parser.add_argument(
        "--group", "-g",
        action="append",
        default=[],
        metavar="TERMS",
        help="Comma-separated search terms ORed together; repeat to AND groups",
    )
    search_parser.add_argument(
        "--mode",
        choices=[m.value for m in RankingMode],
        help="Ranking mode (default: from settings, alphabetical)",
    )
    search_parser.add_argument(
        "--location",
        help="Reference city for distance calculation",
    )
    search_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    _add_common(search_parser)

    # --- distance subcommand ---
    distance_parser = subparsers.add_parser("distance", help="Distance between two cities")
    distance_parser.add_argument("city_a")
    distance_parser.add_argument("city_b")
    _add_common(distance_parser)

    # --- decode-career subcommand ---
    decode_parser = subparsers.add_parser(
        "decode-career",
        help="Decode a stored work history or education blob",
    )
    decode_parser.add_argument("kind", choices=["work", "education"])
    decode_parser.add_argument("blob_file", help="File holding the raw blob text")
    decode_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    return parser.parse_args(argv)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        help="Path to settings YAML file (default: built-in defaults)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_settings(path: str | None) -> Settings:
    if path is None:
        return Settings()
    return Settings.from_yaml(path)


def build_query(groups: list[str]) -> list[SearchGroup]:
    """Turn ``["Rust,Go", "Budapest"]`` into SearchGroups g1, g2."""
    return [
        SearchGroup(id=f"g{i}", badges=raw.split(","))
        for i, raw in enumerate(groups, start=1)
    ]


async def run_search(args: argparse.Namespace, settings: Settings) -> None:
    """Load the roster, search, and print the ranked results."""
    roster = await JsonRosterSource(args.roster).load()
    query = build_query(args.group)
    conn = init_db(settings.database.path)

    try:
        async with NominatimGeocoder(settings.geocoder) as geocoder:
            geo = GeodistanceService(
                SqliteCacheStore(conn), geocoder, settings.geocoder.max_concurrency,
            )
            engine = SearchEngine(settings, geo)
            rows = await engine.search(roster, query, args.mode, args.location)
    finally:
        conn.close()

    if args.export == "json":
        print(export_results_json(rows))
        return

    print(f"\n{len(rows)} of {len(roster)} professionals matched.")
    for position, row in enumerate(rows, start=1):
        r = row.record
        line = f"  {position:>3}. {r.full_name or r.id}"
        if r.city:
            line += f" ({r.city})"
        if row.distance_km is not None:
            line += f" - {format_distance(row.distance_km)} away"
        if r.available:
            line += " - available now"
        elif r.effective_available_from is not None:
            line += f" - available from {r.effective_available_from.date().isoformat()}"
        print(line)


async def run_distance(args: argparse.Namespace, settings: Settings) -> None:
    conn = init_db(settings.database.path)
    try:
        async with NominatimGeocoder(settings.geocoder) as geocoder:
            geo = GeodistanceService(SqliteCacheStore(conn), geocoder)
            km = await geo.distance(args.city_a, args.city_b)
    finally:
        conn.close()

    if km is None:
        print(f"Distance between '{args.city_a}' and '{args.city_b}' could not be resolved.")
    else:
        print(f"{args.city_a} - {args.city_b}: {format_distance(km)}")


def cmd_decode_career(args: argparse.Namespace) -> None:
    """Handle decode-career subcommand."""
    path = Path(args.blob_file)
    if not path.exists():
        msg = f"Blob file not found: {path}"
        raise FileNotFoundError(msg)
    blob = path.read_text(encoding="utf-8")

    if args.kind == "work":
        summary, _ = decode_work_history(blob)
        if summary.strip():
            print(f"Summary: {summary.strip()}\n")
    for entry in decode_career(args.kind, blob):
        print(entry.model_dump_json())


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "decode-career":
        try:
            cmd_decode_career(args)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "distance":
        asyncio.run(run_distance(args, settings))
    else:
        try:
            asyncio.run(run_search(args, settings))
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
