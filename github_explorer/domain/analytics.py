"""Aggregates computed over the currently loaded page of repositories."""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from github_explorer.domain.repository import Repository


POPULAR_TOPICS_LIMIT = 20
LANGUAGE_CHART_LIMIT = 6
TOP_REPOSITORIES_LIMIT = 10
LABEL_WIDTH = 15


@dataclass(frozen=True)
class SummaryStats:
    total_stars: int
    total_forks: int
    total_watchers: int
    avg_stars: int


def popular_topics(repositories: Iterable[Repository], limit: int = POPULAR_TOPICS_LIMIT) -> List[str]:
    """
    Rank topics by how many repositories carry them.

    Ties keep the order in which topics were first seen.

    Args:
        repositories: Repositories to scan
        limit: Maximum number of topics returned

    Returns:
        Topic names sorted by descending frequency
    """
    counts = Counter()
    for repo in repositories:
        counts.update(repo.topics)

    return [topic for topic, _ in counts.most_common(limit)]


def language_distribution(repositories: Iterable[Repository], limit: int = LANGUAGE_CHART_LIMIT) -> Dict[str, int]:
    """Repository count per language, first ``limit`` languages in order of appearance."""
    counts: Dict[str, int] = {}
    for repo in repositories:
        if repo.language:
            counts[repo.language] = counts.get(repo.language, 0) + 1

    return dict(list(counts.items())[:limit])


def top_by_stars(repositories: Sequence[Repository], limit: int = TOP_REPOSITORIES_LIMIT) -> List[Repository]:
    return sorted(repositories, key=lambda repo: repo.stars, reverse=True)[:limit]


def summary_stats(repositories: Sequence[Repository]) -> SummaryStats:
    total_stars = sum(repo.stars for repo in repositories)
    total_forks = sum(repo.forks for repo in repositories)
    total_watchers = sum(repo.watchers for repo in repositories)

    # Rounds half up
    avg_stars = math.floor(total_stars / len(repositories) + 0.5) if repositories else 0

    return SummaryStats(
        total_stars=total_stars,
        total_forks=total_forks,
        total_watchers=total_watchers,
        avg_stars=avg_stars,
    )


def truncate_label(name: str, width: int = LABEL_WIDTH) -> str:
    if len(name) > width:
        return name[:width] + "..."
    return name
