"""
NEO report command-line entry point.

Run as:
    python -m neowatch.report [--start YYYY-MM-DD] [--end YYYY-MM-DD]
                              [--query TEXT] [--sort KEY] [--desc] [--out DIR]

Environment variables:
    NASA_API_KEY   api.nasa.gov key (DEMO_KEY if unset)

Outputs:
    neo_report_<today>.csv   filtered, sorted manifest in the output directory

Console:
    Row count and tier breakdown
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from neowatch.config import Settings
from neowatch.export import write_report
from neowatch.feed import MalformedFeed, NeoRecord, extract_feed
from neowatch.neows import NeoWsClient, TransportFailure, default_window
from neowatch.sorting import SortDirection, SortKey, filter_records, sort_records, use_environment_collation
from neowatch.stats import summarize

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="neowatch.report", description="Export a NEO risk manifest to CSV")
    parser.add_argument("--start", type=date.fromisoformat, help="First feed date (default: today)")
    parser.add_argument("--end", type=date.fromisoformat, help="Last feed date, inclusive (default: start + window)")
    parser.add_argument("--query", default="", help="Case-insensitive name/id filter")
    parser.add_argument("--sort", type=SortKey, default=SortKey.DISTANCE, choices=list(SortKey),
                        help="Sort column (default: distance)")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--out", type=Path, default=Path("."), help="Output directory")
    return parser


async def fetch_records(settings: Settings, start: date, end: date) -> list[NeoRecord]:
    client = NeoWsClient(settings)
    try:
        payload = await client.fetch_feed(start, end)
    finally:
        await client.aclose()
    return extract_feed(payload)


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    use_environment_collation()
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    today = date.today()
    start = args.start or today
    end = args.end or default_window(start, settings.feed_window_days)[1]
    if end < start:
        log.error("End date %s is before start date %s", end, start)
        sys.exit(2)

    log.info("=== NEO report %s to %s ===", start, end)

    # ------------------------------------------------------------------
    # Step 1: Fetch + normalize
    # ------------------------------------------------------------------
    try:
        records = asyncio.run(fetch_records(settings, start, end))
    except TransportFailure as exc:
        log.error("Feed fetch failed: %s", exc)
        sys.exit(1)
    except MalformedFeed as exc:
        log.error("Feed is malformed: %s", exc)
        sys.exit(1)

    # ------------------------------------------------------------------
    # Step 2: Filter + sort
    # ------------------------------------------------------------------
    direction = SortDirection.DESC if args.desc else SortDirection.ASC
    view = sort_records(filter_records(records, args.query), args.sort, direction)

    # ------------------------------------------------------------------
    # Step 3: Output
    # ------------------------------------------------------------------
    args.out.mkdir(parents=True, exist_ok=True)
    path = write_report(view, args.out, today)

    stats = summarize(view)
    print()
    print(f"  Objects in feed:      {len(records)}")
    print(f"  Objects exported:     {len(view)}")
    print("  Tiers:                " + ", ".join(f"{k}={v}" for k, v in stats.tiers.items()))
    print(f"  Report:               {path}")
    print()


if __name__ == "__main__":
    main()
