"""Tests for the explorer's filter state and loading."""

from unittest.mock import MagicMock

import pytest

from github_explorer.application.explorer_service import ExplorerService
from github_explorer.application.query_cache import QueryCache
from github_explorer.domain.repository import SearchResponse
from github_explorer.infrastructure.github_client import GitHubApiError


@pytest.fixture
def github_client(repo_factory):
    client = MagicMock()
    client.search_repositories.return_value = SearchResponse(
        total_count=2, incomplete_results=False, items=[repo_factory(1), repo_factory(2)]
    )
    client.get_popular_topics.return_value = [f"topic-{i}" for i in range(20)]
    return client


@pytest.fixture
def clock():
    return MagicMock(return_value=0.0)


@pytest.fixture
def explorer(github_client, clock):
    return ExplorerService(github_client, QueryCache(clock=clock))


class TestFilters:
    """Filter state transitions."""

    def test_defaults(self, explorer):
        assert (explorer.search_query, explorer.language, explorer.sort_by) == ("", "All", "stars")
        assert explorer.selected_topics == []
        assert not explorer.has_active_filters()

    def test_toggle_topic(self, explorer):
        explorer.toggle_topic("ai")
        explorer.toggle_topic("web")
        assert explorer.selected_topics == ["ai", "web"]

        explorer.toggle_topic("ai")
        assert explorer.selected_topics == ["web"]
        assert explorer.has_active_filters()

    def test_clear_filters_keeps_sort(self, explorer):
        explorer.search_query = "django"
        explorer.language = "Python"
        explorer.sort_by = "forks"
        explorer.toggle_topic("web")

        explorer.clear_filters()

        assert (explorer.search_query, explorer.language, explorer.sort_by) == ("", "All", "forks")
        assert explorer.selected_topics == []

    def test_active_filter_chips(self, explorer):
        explorer.language = "Go"
        explorer.toggle_topic("cli")
        explorer.toggle_topic("web")

        assert explorer.active_filters() == [("language", "Go"), ("topic", "cli"), ("topic", "web")]

    def test_chip_removes_topic_no_longer_offered(self, explorer, github_client, clock):
        explorer.load_topics()
        explorer.toggle_topic("topic-3")
        clock.return_value = 31 * 60.0
        github_client.get_popular_topics.return_value = ["other"]
        explorer.load_topics()
        assert "topic-3" not in explorer.visible_topics()

        explorer.remove_filter("topic", "topic-3")

        assert explorer.selected_topics == []
        assert explorer.active_filters() == []

    def test_chip_resets_language(self, explorer):
        explorer.language = "Rust"
        explorer.toggle_topic("cli")

        explorer.remove_filter("language", "Rust")

        assert explorer.language == "All"
        assert explorer.selected_topics == ["cli"]

    def test_unknown_chip_kind(self, explorer):
        with pytest.raises(ValueError):
            explorer.remove_filter("owner", "acme")

    def test_query_key(self, explorer):
        explorer.search_query = "x"
        explorer.toggle_topic("a")
        assert explorer.query_key() == ("repositories", "x", "All", "stars", ("a",))


class TestLoadRepositories:
    """Searches go through the cache."""

    def test_search_params_include_topics(self, explorer, github_client):
        explorer.search_query = "orm"
        explorer.language = "Go"
        explorer.sort_by = "updated"
        explorer.toggle_topic("database")

        result = explorer.load_repositories()

        params = github_client.search_repositories.call_args.args[0]
        assert params.query == "orm topic:database"
        assert params.language == "Go"
        assert params.sort == "updated"
        assert params.per_page == 30
        assert [repo.id for repo in result.repositories] == [1, 2]
        assert result.error is None
        assert result.notification is None

    def test_same_filters_served_from_cache(self, explorer, github_client, clock):
        explorer.load_repositories()
        clock.return_value = 299.0
        explorer.load_repositories()
        assert github_client.search_repositories.call_count == 1

        clock.return_value = 301.0
        explorer.load_repositories()
        assert github_client.search_repositories.call_count == 2

    def test_changed_filters_refetch(self, explorer, github_client):
        explorer.load_repositories()
        explorer.language = "Rust"
        explorer.load_repositories()
        assert github_client.search_repositories.call_count == 2

    def test_error_becomes_notification(self, explorer, github_client):
        github_client.search_repositories.side_effect = GitHubApiError("offline")

        result = explorer.load_repositories()

        assert result.repositories == []
        assert isinstance(result.error, GitHubApiError)
        assert result.notification.title == "Error fetching repositories"
        assert result.notification.description == "Please check your internet connection and try again."

    def test_error_serves_stale_results(self, explorer, github_client, clock):
        explorer.load_repositories()
        clock.return_value = 600.0
        github_client.search_repositories.side_effect = GitHubApiError("offline")

        result = explorer.load_repositories()

        assert [repo.id for repo in result.repositories] == [1, 2]
        assert result.error is not None


class TestTopics:
    """Popular topics for the filter tags."""

    def test_load_and_visible_topics(self, explorer, github_client):
        assert len(explorer.load_topics()) == 20
        explorer.load_topics()

        github_client.get_popular_topics.assert_called_once()
        assert explorer.visible_topics() == [f"topic-{i}" for i in range(12)]

    def test_topic_failure_is_not_raised(self, explorer, github_client):
        github_client.get_popular_topics.side_effect = GitHubApiError("offline")
        assert explorer.load_topics() == []
        assert explorer.visible_topics() == []
