#!/usr/bin/env python3
"""Create the PostgreSQL bookmark table, optionally importing file bookmarks.

Run before switching BOOKMARK_STORE to "postgres"; with --import-file the
bookmarks saved by the file backend are carried over.
"""

import argparse
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from github_explorer.application.bookmark_service import BookmarkService
from github_explorer.infrastructure.key_value_store import (
    FileKeyValueStore,
    PostgresKeyValueStore,
    copy_keys,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Prepare PostgreSQL bookmark storage.")
    ap.add_argument(
        "--import-file",
        metavar="PATH",
        nargs="?",
        const="",
        help="Copy bookmarks from the JSON file store (default: BOOKMARKS_PATH)",
    )
    args = ap.parse_args(argv)

    store = PostgresKeyValueStore()
    try:
        store.initialize_schema()

        if args.import_file is not None:
            source = FileKeyValueStore(args.import_file or None)
            copied = copy_keys(source, store, [BookmarkService.STORAGE_KEY])
            count = len(BookmarkService(store).bookmarks) if copied else 0
            logger.info(f"Imported {count} bookmarks from {source.path}")

        return 0
    except Exception as e:
        logger.error(f"PostgreSQL bookmark storage setup failed: {e}", exc_info=True)
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
