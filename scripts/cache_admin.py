#!/usr/bin/env python3
"""CLI script to inspect and maintain the response cache.

Intended for cron jobs and manual maintenance against the SQLite cache.

Usage:
    uv run python scripts/cache_admin.py stats
    uv run python scripts/cache_admin.py cleanup
    uv run python scripts/cache_admin.py clear --pattern ivf
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from careguide.config import get_settings
from careguide.infrastructure.cache import (
    CacheAdministration,
    ResponseCache,
    SQLiteCacheStore,
)
from careguide.infrastructure.database import Database
from careguide.infrastructure.observability import configure_logging


async def run(command: str, pattern: str | None) -> None:
    """Run one admin command against the configured database.

    Args:
        command: One of "stats", "cleanup" or "clear".
        pattern: Optional query-text pattern for "clear".
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)

    db = Database(settings.database_path)
    await db.connect()

    try:
        admin = CacheAdministration(
            ResponseCache(SQLiteCacheStore(db), ttl_hours=settings.cache_ttl_hours)
        )

        if command == "stats":
            stats = await admin.get_stats()
            print(f"Entries:       {stats.total_entries}")
            print(f"Total hits:    {stats.total_hits}")
            print(f"Expired:       {stats.expired_entries}")
            print(f"Hit rate:      {stats.hit_rate}%")
            print(f"Average hits:  {stats.average_hit_count}")
        elif command == "cleanup":
            deleted = await admin.cleanup_expired()
            print(f"✓ Removed {deleted} expired entries")
        elif pattern:
            deleted = await admin.clear_matching(pattern)
            print(f"✓ Removed {deleted} entries matching '{pattern}'")
        else:
            deleted = await admin.clear_all()
            print(f"✓ Removed {deleted} entries")

    finally:
        await db.disconnect()


def main() -> None:
    """Parse arguments and run the command."""
    parser = argparse.ArgumentParser(
        description="Inspect and maintain the response cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show usage statistics
  uv run python scripts/cache_admin.py stats

  # Remove expired entries (suitable for cron)
  uv run python scripts/cache_admin.py cleanup

  # Drop cached answers mentioning a topic after editing its content
  uv run python scripts/cache_admin.py clear --pattern "egg freezing"
        """,
    )

    parser.add_argument("command", choices=["stats", "cleanup", "clear"])
    parser.add_argument(
        "--pattern",
        help="Only clear entries whose query contains this text (case-insensitive)",
    )

    args = parser.parse_args()

    if args.pattern is not None and args.command != "clear":
        print("✗ Error: --pattern only applies to 'clear'", file=sys.stderr)
        sys.exit(1)

    asyncio.run(run(args.command, args.pattern))


if __name__ == "__main__":
    main()
