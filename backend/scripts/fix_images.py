#!/usr/bin/env python3
"""
Re-assign article images.

Articles stored before the keyword image pools existed carry either no image
or one of the old single-image category defaults. This walks them (or every
article with --force) and picks a fresh image for each.

Usage (from backend/):
    python -m scripts.fix_images
    python -m scripts.fix_images --force
"""

import argparse
import asyncio

from newsbrief.core.logging import get_logger, setup_logging
from newsbrief.db.session import AsyncSessionLocal, close_db
from newsbrief.services.normalizer import backfill_images

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Backfill article images")
    parser.add_argument(
        "--force",
        action="store_true",
        help="reassign images on every article, not only missing/legacy ones",
    )
    return parser.parse_args(argv)


async def run(force: bool) -> int:
    try:
        async with AsyncSessionLocal() as db:
            updated = await backfill_images(db, force=force)
    finally:
        await close_db()

    print(f"✅ Updated images on {updated} article(s)")
    return updated


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_args(argv)
    logger.info("fix_images_started", force=args.force)
    asyncio.run(run(args.force))


if __name__ == "__main__":
    main()
