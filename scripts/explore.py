#!/usr/bin/env python3
"""Script to search GitHub repositories and print them as cards."""

import argparse
import logging
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from github_explorer.application.bookmark_service import BookmarkService
from github_explorer.domain.analytics import language_distribution, popular_topics
from github_explorer.domain.repository import LANGUAGES, SORT_KEYS, SORT_ORDERS, SearchParams
from github_explorer.domain.search_query import TRENDING_PERIODS, merge_topics_into_query
from github_explorer.infrastructure.github_client import GitHubRestClient
from github_explorer.infrastructure.key_value_store import create_store
from github_explorer.presentation.cards import render_card_text
from github_explorer.presentation.charts import summary_metrics

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Search GitHub repositories.")
    ap.add_argument("--query", default="", help="Free-text search query")
    ap.add_argument("--language", default="All", help=f"Language filter, e.g. {', '.join(LANGUAGES[1:5])}")
    ap.add_argument("--sort", default="stars", choices=SORT_KEYS)
    ap.add_argument("--order", default="desc", choices=SORT_ORDERS)
    ap.add_argument("--topic", action="append", default=[], help="Topic filter (repeatable)")
    ap.add_argument("--page", type=int, default=1)
    ap.add_argument("--per-page", type=int, default=30)
    ap.add_argument("--trending", choices=list(TRENDING_PERIODS), help="Show trending repositories instead")
    ap.add_argument("--analytics", action="store_true", help="Print summary statistics")
    ap.add_argument("--topics", action="store_true", help="Print popular topics of this week's trending repositories")
    return ap.parse_args(argv)


def print_analytics(repositories):
    print()
    for label, value in summary_metrics(repositories):
        print(f"{label:>15}: {value}")
    print()
    print("Languages:")
    for language, count in language_distribution(repositories).items():
        print(f"  {language:<15} {count}")
    print()
    print("Topics: " + ", ".join(popular_topics(repositories)))


def main(argv=None):
    """Search repositories and print them."""
    try:
        args = parse_args(argv)

        github_token = os.getenv("GITHUB_TOKEN")
        if not github_token:
            logger.warning("GITHUB_TOKEN not found. Using unauthenticated requests (limited rate).")

        github_client = GitHubRestClient(token=github_token)

        if args.topics:
            for topic in github_client.get_popular_topics():
                print(topic)
            return 0

        if args.trending:
            repositories = github_client.get_trending_repositories(args.language, args.trending)
        else:
            params = SearchParams(
                query=merge_topics_into_query(args.query, args.topic),
                language=args.language,
                sort=args.sort,
                order=args.order,
                per_page=args.per_page,
                page=args.page,
            )
            response = github_client.search_repositories(params)
            repositories = response.items
            logger.info(f"Showing {len(repositories)} of {response.total_count} repositories")

        store = create_store()
        bookmarks = BookmarkService(store)
        for repo in repositories:
            print(render_card_text(repo, bookmarks.is_bookmarked(repo.id)))
            print()
        store.close()

        if args.analytics and repositories:
            print_analytics(repositories)

        return 0

    except Exception as e:
        logger.error(f"Search failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
