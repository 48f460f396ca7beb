"""GitHub REST API client for repository search."""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from github_explorer.domain.analytics import POPULAR_TOPICS_LIMIT, popular_topics
from github_explorer.domain.repository import Repository, SearchParams, SearchResponse
from github_explorer.domain.search_query import build_search_query, build_trending_query

logger = logging.getLogger(__name__)


class GitHubApiError(Exception):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitExceeded(GitHubApiError):
    """Raised when GitHub API rate limit is exceeded."""

    def __init__(self, message: str, reset_at: Optional[int] = None):
        super().__init__(message, status_code=403)
        self.reset_at = reset_at


class AuthenticationError(GitHubApiError):
    """Raised when the token is rejected."""


class RepositoryNotFound(GitHubApiError):
    """Raised when a repository (or endpoint) does not exist."""


class GitHubRestClient:
    """Client for the GitHub REST search API.

    Failures are logged and re-raised; there is no retry.
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    USER_AGENT = "GitHub-Explorer-App"
    TRENDING_PAGE_SIZE = 30

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHub REST client.

        Args:
            token: GitHub personal access token. If None, uses GITHUB_TOKEN env var.
            base_url: API root. If None, uses GITHUB_API_URL env var or api.github.com.
            timeout: Per-request timeout in seconds
            session: Optional requests session (shared connection pool)
        """
        if token is None:
            token = os.getenv("GITHUB_TOKEN")
        if base_url is None:
            base_url = os.getenv("GITHUB_API_URL", self.DEFAULT_BASE_URL)

        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.USER_AGENT,
        }

        # Add authorization header if token is available
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute a GET request and decode the JSON body.

        Raises:
            RateLimitExceeded: If the rate limit is exhausted
            AuthenticationError: If the token is rejected
            RepositoryNotFound: If the resource does not exist
            GitHubApiError: For any other failure
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"GitHub API Error: GET {url} failed: {e}")
            raise GitHubApiError(f"Request to {url} failed: {e}") from e

        if response.status_code == 200:
            try:
                return response.json()
            except ValueError as e:
                logger.error(f"GitHub API Error: invalid JSON from {url}: {e}")
                raise GitHubApiError(f"Invalid JSON response from {url}", status_code=200) from e

        if response.status_code == 401:
            logger.error("GitHub API Error: authentication failed")
            raise AuthenticationError("Authentication failed. Check your GitHub token.", status_code=401)

        if response.status_code == 403:
            remaining = response.headers.get("X-RateLimit-Remaining")
            if remaining is not None and int(remaining) == 0:
                reset_time = int(response.headers.get("X-RateLimit-Reset", 0))
                logger.error(f"GitHub API Error: rate limit exceeded (resets at {reset_time})")
                raise RateLimitExceeded("Rate limit exceeded", reset_at=reset_time)
            logger.error(f"GitHub API Error: forbidden: {response.text}")
            raise GitHubApiError(f"Forbidden: {response.text}", status_code=403)

        if response.status_code == 404:
            logger.error(f"GitHub API Error: not found: {url}")
            raise RepositoryNotFound(f"Not found: {url}", status_code=404)

        logger.error(f"GitHub API Error: {response.status_code} from {url}: {response.text}")
        raise GitHubApiError(
            f"GitHub API returned {response.status_code}: {response.text}",
            status_code=response.status_code,
        )

    def search_repositories(self, params: Optional[SearchParams] = None) -> SearchResponse:
        """
        Search repositories.

        Args:
            params: Search parameters. Defaults to the most-starred repositories
                created in the last 30 days.

        Returns:
            One page of results
        """
        if params is None:
            params = SearchParams()

        search_query = build_search_query(params.query, params.language)
        logger.debug(f"Searching repositories: {search_query!r} (sort={params.sort}, page={params.page})")

        data = self._get(
            "/search/repositories",
            params={
                "q": search_query,
                "sort": params.sort,
                "order": params.order,
                "per_page": params.per_page,
                "page": params.page,
            },
        )
        return SearchResponse.from_api(data)

    def get_trending_repositories(self, language: Optional[str] = None, period: str = "week") -> List[Repository]:
        """Most-starred repositories created within ``period`` (day, week or month)."""
        search_query = build_trending_query(language, period)
        data = self._get(
            "/search/repositories",
            params={
                "q": search_query,
                "sort": "stars",
                "order": "desc",
                "per_page": self.TRENDING_PAGE_SIZE,
            },
        )
        return SearchResponse.from_api(data).items

    def get_repository_details(self, owner: str, repo: str) -> Repository:
        data = self._get(f"/repos/{owner}/{repo}")
        return Repository.from_api(data)

    def get_popular_topics(self, limit: int = POPULAR_TOPICS_LIMIT) -> List[str]:
        """Most frequent topics among this week's trending repositories."""
        trending = self.get_trending_repositories()
        topics = popular_topics(trending, limit)
        logger.info(f"Found {len(topics)} popular topics across {len(trending)} trending repositories")
        return topics
