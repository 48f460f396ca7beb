#!/usr/bin/env python3
"""Script to list or toggle bookmarked repositories."""

import argparse
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from github_explorer.application.bookmark_service import BookmarkService
from github_explorer.infrastructure.key_value_store import create_store

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Manage bookmarked repositories.")
    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="Print bookmarked repository ids")
    toggle = sub.add_parser("toggle", help="Bookmark or un-bookmark a repository")
    toggle.add_argument("repo_id", type=int)
    args = ap.parse_args(argv)

    try:
        store = create_store()
        bookmarks = BookmarkService(store)

        if args.command == "list":
            for repo_id in bookmarks.bookmarks:
                print(repo_id)
        else:
            bookmarked = bookmarks.toggle(args.repo_id)
            print(f"{args.repo_id} {'bookmarked' if bookmarked else 'removed'}")

        store.close()
        return 0
    except Exception as e:
        logger.error(f"Bookmark command failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
