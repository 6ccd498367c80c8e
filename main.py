"""
PlayHub library view - command line entry point
Loads a catalog snapshot and prints a computed view or the dashboard stats
"""

import sys
import argparse
from pathlib import Path

import msgspec

from playhub.config import config_manager
from playhub.logger import setup_logger
from playhub.engine import LibraryViewEngine
from playhub.filter_pipeline import ViewKind
from playhub.models import FilterDimensions, decode_entries, encode_json, format_json
from playhub.store import MemoryStore, SQLiteStore


def build_parser():
    parser = argparse.ArgumentParser(description="Compute PlayHub library views from a snapshot")
    parser.add_argument("snapshot", help="JSON file containing an array of library entries")
    parser.add_argument("--search", default="", help="search text, may contain status:/platform: directives")
    parser.add_argument("--view", default=ViewKind.GAMES.value, choices=[v.value for v in ViewKind])
    parser.add_argument("--sort", default=None, help="name, playtime or last_played")
    parser.add_argument("--time", default=None, help="all, short, medium, long or hltb")
    parser.add_argument("--recency", default=None, help="all_time, past_2_weeks or past_year")
    parser.add_argument("--category", default=None, help="utility category for --view utilities")
    parser.add_argument("--stats", action="store_true", help="print dashboard stats instead of a view")
    parser.add_argument("--platform", default=None, help="scope dashboard stats to one platform")
    parser.add_argument("--db", default=None, help="SQLite store for view state (default: in-memory)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logger = setup_logger()

    try:
        entries = decode_entries(Path(args.snapshot).read_bytes())
    except OSError as e:
        logger.error(f"Failed to read snapshot: {e}")
        return 1
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        logger.error(f"Snapshot is not a valid entry list: {e}")
        return 1

    store = SQLiteStore(args.db) if args.db else MemoryStore()
    engine = LibraryViewEngine(store=store, config=config_manager())
    logger.info(f"Loaded {len(entries)} entries from {args.snapshot}")

    if args.stats:
        result = engine.home_stats(entries, platform=args.platform)
    elif args.view == ViewKind.UTILITIES:
        result = engine.utilities_view(entries, search=args.search, category=args.category)
    else:
        dims = FilterDimensions(
            time_filter=args.time or engine.time_filter,
            recency_filter=args.recency or engine.recency_filter,
        )
        result = engine.filter_and_sort(
            entries,
            search=args.search,
            view=ViewKind(args.view),
            sort_key=args.sort,
            dims=dims,
        )

    sys.stdout.write(format_json(encode_json(result)).decode("utf-8") + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
