#!/usr/bin/env python3
"""Script to export a page of search results to CSV and JSON."""

import csv
import json
import logging
import sys
import os
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from github_explorer.domain.repository import SearchParams
from github_explorer.infrastructure.github_client import GitHubRestClient

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def dump_to_csv(records, output_file: str):
    """Dump repository records to CSV."""
    if not records:
        logger.warning("No data to dump")
        return

    with open(output_file, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=records[0].keys())
        writer.writeheader()
        writer.writerows(records)

    logger.info(f"Dumped {len(records)} repositories to {output_file}")


def dump_to_json(records, output_file: str):
    """Dump repository records to JSON."""
    if not records:
        logger.warning("No data to dump")
        return

    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(records, f, indent=2, ensure_ascii=False)

    logger.info(f"Dumped {len(records)} repositories to {output_file}")


def main():
    """Export search results to CSV and JSON."""
    try:
        params = SearchParams(
            query=os.getenv("SEARCH_QUERY", ""),
            language=os.getenv("SEARCH_LANGUAGE", ""),
            sort=os.getenv("SEARCH_SORT", "stars"),
            per_page=int(os.getenv("PER_PAGE", "30")),
        )
        github_client = GitHubRestClient()
        repositories = github_client.search_repositories(params).items
        records = [repo.to_record() for repo in repositories]

        output_dir = os.getenv("OUTPUT_DIR", "artifacts")
        os.makedirs(output_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_file = os.path.join(output_dir, f"repositories_{timestamp}.csv")
        json_file = os.path.join(output_dir, f"repositories_{timestamp}.json")

        dump_to_csv(records, csv_file)
        dump_to_json(records, json_file)

        logger.info(f"Export completed. Files: {csv_file}, {json_file}")
        return 0
    except Exception as e:
        logger.error(f"Export failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
