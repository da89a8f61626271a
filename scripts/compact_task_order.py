#!/usr/bin/env python3
"""
Compact task ranks for every (owner, category) on the board.

Deletes leave gaps and concurrent creates can hand out the same rank; this
renumbers each category to 0..N-1 keeping the current display order.
"""
import argparse
import asyncio
import logging

from taskboard.core.database import AsyncSessionLocal, engine
from taskboard.core.logging import configure_logging
from taskboard.services.ordered_task_store import OrderedTaskStore
from taskboard.services.task_repository import TaskRepository

logger = logging.getLogger("compact_task_order")


async def compact_task_order(owner_email: str = None) -> int:
    """Compact all categories (optionally of one owner). Returns the number of rewritten ranks."""
    async with AsyncSessionLocal() as db:
        repository = TaskRepository(db)
        store = OrderedTaskStore(db, repository=repository)

        scopes = await repository.find_scopes()
        if owner_email:
            scopes = [scope for scope in scopes if scope[0] == owner_email]

        total_modified = 0
        for owner, category in scopes:
            result = await store.compact_category(owner, category)
            if result.modified_count:
                logger.info(f"  {owner} / {category}: rewrote {result.modified_count} of {result.matched_count}")
            total_modified += result.modified_count

        logger.info(f"Checked {len(scopes)} categories, rewrote {total_modified} ranks")
        return total_modified


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--owner", help="Only compact this owner's categories")
    args = parser.parse_args()

    configure_logging()

    async def _run():
        try:
            await compact_task_order(args.owner)
        finally:
            await engine.dispose()

    asyncio.run(_run())


if __name__ == "__main__":
    main()
