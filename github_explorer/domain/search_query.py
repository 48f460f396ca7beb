"""Search query construction for the GitHub repository search endpoint."""

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional


# Recency window applied when the user has not typed a query
DEFAULT_WINDOW_DAYS = 30
DEFAULT_QUERY = "stars:>1"
TRENDING_MIN_STARS = 10

TRENDING_PERIODS = {
    "day": 1,
    "week": 7,
    "month": 30,
}


def _today() -> date:
    return datetime.now(timezone.utc).date()


def date_threshold(days: int, today: Optional[date] = None) -> str:
    """Return ``today - days`` formatted as ``YYYY-MM-DD``."""
    if today is None:
        today = _today()
    return (today - timedelta(days=days)).isoformat()


def language_clause(language: Optional[str]) -> str:
    if language and language != "All":
        return f" language:{language}"
    return ""


def build_search_query(query: str = "", language: str = "", today: Optional[date] = None) -> str:
    """
    Build the ``q`` parameter for a repository search.

    An empty query falls back to ``stars:>1`` and is limited to repositories
    created within the last 30 days.

    Args:
        query: Free-text query typed by the user (may contain qualifiers)
        language: Language filter; "All" or empty disables it
        today: Reference date for the recency window (UTC today by default)
    """
    search_query = query or DEFAULT_QUERY
    search_query += language_clause(language)

    if not query:
        search_query += f" created:>{date_threshold(DEFAULT_WINDOW_DAYS, today)}"

    return search_query


def build_trending_query(
    language: Optional[str] = None,
    period: str = "week",
    today: Optional[date] = None,
) -> str:
    """Query for repositories created within ``period`` with more than 10 stars."""
    if period not in TRENDING_PERIODS:
        raise ValueError(f"Unknown trending period: {period!r} (expected one of {list(TRENDING_PERIODS)})")

    threshold = date_threshold(TRENDING_PERIODS[period], today)
    return f"created:>{threshold} stars:>{TRENDING_MIN_STARS}" + language_clause(language)


def build_topics_clause(topics: Iterable[str]) -> str:
    return " ".join(f"topic:{topic}" for topic in topics)


def merge_topics_into_query(query: str, topics: Iterable[str]) -> str:
    """Append ``topic:`` clauses for the selected topics to a free-text query."""
    clause = build_topics_clause(topics)
    if not clause:
        return query
    return f"{query} {clause}" if query else clause
