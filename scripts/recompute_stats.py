#!/usr/bin/env python
"""Recompute every member's statistics from the stored game results.

Member statistics are derived data. This script rebuilds all of them,
for example after editing game_results by hand.

Usage:
    uv run python scripts/recompute_stats.py

The script is idempotent - running it multiple times is safe.
"""

import asyncio

from mjleague.db.session import Database
from mjleague.services import LeagueService
from mjleague.settings import get_settings


async def recompute_stats() -> None:
    """Recompute all members and commit."""
    settings = get_settings()
    database = Database(settings.database_url, echo=settings.database_echo)
    await database.open(create_tables=False)
    try:
        async with database.session() as session:
            count = await LeagueService(session, settings).recompute_all()
            await session.commit()
        print(f"Recomputed statistics for {count} members")
    finally:
        await database.close()


if __name__ == "__main__":
    asyncio.run(recompute_stats())
