# mailing_api/cli/retention.py
"""
CLI commands for retention management.

Usage:
    python -m mailing_api.cli.retention status
    python -m mailing_api.cli.retention sweep --dry-run
    python -m mailing_api.cli.retention sweep --ttl-seconds 600
"""

import argparse
import sys
from datetime import UTC, datetime, timedelta

from dotenv import load_dotenv

load_dotenv()


def get_store():
    """Get the configured entry store, creating tables for SQL stores."""
    from mailing_api.storage.factory import get_entry_store

    store = get_entry_store()
    if store.name == "sql":
        from mailing_api.database import init_db

        init_db()
    return store


def _ttl_from_args(args) -> timedelta:
    from mailing_api.config import get_settings

    seconds = args.ttl_seconds if args.ttl_seconds is not None else get_settings().RETENTION_TTL_SECONDS
    return timedelta(seconds=seconds)


def cmd_status(args):
    """Show entry counts and how many entries are past the TTL."""
    from mailing_api.storage.base import QueryParams

    store = get_store()
    ttl = _ttl_from_args(args)
    cutoff = datetime.now(UTC) - ttl

    total = store.count()
    stale = len(store.query(QueryParams(insert_time_before=cutoff)))

    print("\n=== Retention Status ===\n")
    print(f"Store: {store.name}")
    print(f"TTL: {int(ttl.total_seconds())}s (cutoff {cutoff.isoformat()})")
    print(f"\nTotal entries: {total}")
    print(f"Past TTL: {stale}")
    print()


def cmd_sweep(args):
    """Run a single retention sweep."""
    from mailing_api.services.retention import sweep_expired_entries

    store = get_store()
    result = sweep_expired_entries(store, ttl=_ttl_from_args(args), dry_run=args.dry_run)

    if result.dry_run:
        print(f"[dry run] Would delete {result.stale_found} entries inserted before {result.cutoff.isoformat()}")
    else:
        print(f"Deleted {result.deleted} entries inserted before {result.cutoff.isoformat()}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Mailing entry retention management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser("status", help="Show retention status")
    status_parser.add_argument("--ttl-seconds", type=int, default=None, help="Override RETENTION_TTL_SECONDS")
    status_parser.set_defaults(func=cmd_status)

    sweep_parser = subparsers.add_parser("sweep", help="Delete entries past the TTL once")
    sweep_parser.add_argument("--ttl-seconds", type=int, default=None, help="Override RETENTION_TTL_SECONDS")
    sweep_parser.add_argument("--dry-run", action="store_true", help="Only count stale entries")
    sweep_parser.set_defaults(func=cmd_sweep)

    args = parser.parse_args(argv)
    args.func(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
