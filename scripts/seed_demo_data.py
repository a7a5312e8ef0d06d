#!/usr/bin/env python3
"""
Comm-It Demo Data Seeder

Writes the demo posts into the configured store (file, Redis or
database, see ``STORAGE_BACKEND``).  Existing posts are left alone
unless ``--clean`` is given.

Usage:
    python scripts/seed_demo_data.py          # Seed (skip if posts exist)
    python scripts/seed_demo_data.py --clean  # Replace stored posts with demo posts
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path for ``src`` imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config import get_settings  # noqa: E402
from src.core.models import Post  # noqa: E402
from src.services.storage import create_store  # noqa: E402
from src.services.storage.seed import SEED_POSTS  # noqa: E402

logger = logging.getLogger(__name__)


async def seed(clean: bool = False) -> int:
    """Seed the demo posts. Returns a process exit code."""
    settings = get_settings()
    backend = settings.resolved_storage_backend

    print("=" * 60)
    print("Comm-It Demo Data Seeder")
    print("=" * 60)
    print(f"\n  Storage backend: {backend}")

    # Seeding is explicit here, so the store must not auto-seed on read.
    store = create_store(settings.model_copy(update={"seed_demo_posts": False}))
    try:
        existing = await store.load()
        if existing and not clean:
            print(f"  Store already holds {len(existing)} post(s):")
            for post in existing:
                print(f"    - [{post.type}] {post.title}")
            print("  Use --clean to replace them with the demo posts.")
            return 0

        if existing:
            print(f"  DELETE  {len(existing)} existing post(s)")

        posts = [Post.model_validate(p) for p in SEED_POSTS]
        await store.save(posts)
        for post in posts:
            print(f"  SEED  [{post.type}] {post.title} (id={post.id})")
    finally:
        await store.close()

    print("\n" + "=" * 60)
    print("Seed Complete!")
    print("=" * 60)
    print(f"  Posts: {len(posts)}")
    print()
    return 0


def main() -> int:
    """Entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(description="Seed Comm-It demo posts")
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Replace any stored posts with the demo posts",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    return asyncio.run(seed(clean=args.clean))


if __name__ == "__main__":
    sys.exit(main())
