"""Application service holding the explorer's filter state and loading results."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from github_explorer.application.query_cache import QueryCache
from github_explorer.domain.repository import Repository, SearchParams
from github_explorer.domain.search_query import merge_topics_into_query
from github_explorer.infrastructure.github_client import GitHubApiError, GitHubRestClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """User-visible error message."""

    title: str
    description: str


FETCH_ERROR_NOTIFICATION = Notification(
    title="Error fetching repositories",
    description="Please check your internet connection and try again.",
)


@dataclass
class QueryResult:
    repositories: List[Repository] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def notification(self) -> Optional[Notification]:
        return FETCH_ERROR_NOTIFICATION if self.error else None


class ExplorerService:
    """Service turning the current filters into repository searches."""

    PAGE_SIZE = 30
    REPOSITORIES_STALE_SECONDS = 5 * 60
    TOPICS_STALE_SECONDS = 30 * 60
    VISIBLE_TOPICS = 12

    def __init__(self, github_client: GitHubRestClient, cache: Optional[QueryCache] = None):
        """
        Initialize explorer service.

        Args:
            github_client: GitHub API client
            cache: Query cache; a private one is created if None
        """
        self.github_client = github_client
        self.cache = cache or QueryCache()

        self.search_query = ""
        self.language = "All"
        self.sort_by = "stars"
        self.selected_topics: List[str] = []
        self.available_topics: List[str] = []

    def toggle_topic(self, topic: str):
        if topic in self.selected_topics:
            self.selected_topics = [t for t in self.selected_topics if t != topic]
        else:
            self.selected_topics = self.selected_topics + [topic]

    def clear_filters(self):
        self.search_query = ""
        self.language = "All"
        self.selected_topics = []

    def has_active_filters(self) -> bool:
        return self.language != "All" or bool(self.selected_topics)

    def active_filters(self) -> List[Tuple[str, str]]:
        """(kind, value) pairs for the removable filter chips, language first."""
        chips = []
        if self.language != "All":
            chips.append(("language", self.language))
        chips.extend(("topic", topic) for topic in self.selected_topics)
        return chips

    def remove_filter(self, kind: str, value: str):
        if kind == "language":
            self.language = "All"
        elif kind == "topic":
            self.selected_topics = [t for t in self.selected_topics if t != value]
        else:
            raise ValueError(f"Unknown filter kind: {kind!r}")

    def query_key(self) -> Tuple:
        return ("repositories", self.search_query, self.language, self.sort_by, tuple(self.selected_topics))

    def search_params(self) -> SearchParams:
        return SearchParams(
            query=merge_topics_into_query(self.search_query, self.selected_topics),
            language=self.language,
            sort=self.sort_by,
            per_page=self.PAGE_SIZE,
        )

    def load_repositories(self) -> QueryResult:
        """
        Load repositories for the current filters.

        Errors are not raised; they are returned on the result together with
        whatever data was last loaded for the same filters.
        """
        key = self.query_key()
        try:
            params = self.search_params()
            repositories = self.cache.fetch(
                key,
                lambda: self.github_client.search_repositories(params).items,
                self.REPOSITORIES_STALE_SECONDS,
            )
            return QueryResult(repositories=repositories)
        except (GitHubApiError, ValueError) as e:
            logger.error(f"Error fetching repositories for {key!r}: {e}")
            return QueryResult(repositories=self.cache.get_stale(key) or [], error=e)

    def load_topics(self) -> List[str]:
        try:
            self.available_topics = self.cache.fetch(
                ("topics",),
                self.github_client.get_popular_topics,
                self.TOPICS_STALE_SECONDS,
            )
        except GitHubApiError as e:
            logger.warning(f"Could not load popular topics: {e}")
        return self.available_topics

    def visible_topics(self) -> List[str]:
        return self.available_topics[:self.VISIBLE_TOPICS]
