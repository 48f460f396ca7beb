"""
Shared test fixtures.

Provides: GitHub API item factory, repository factory, in-memory key-value store,
fake HTTP responses
"""

from unittest.mock import MagicMock

import pytest

from github_explorer.domain.repository import Repository


class InMemoryStore:
    """Key-value store double recording every write."""

    def __init__(self, initial=None):
        self.data = dict(initial or {})
        self.writes = []

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        self.writes.append((key, value))

    def close(self):
        pass


def make_item(repo_id=1, name="repo", owner="octocat", **overrides):
    """Build a REST API repository item."""
    item = {
        "id": repo_id,
        "name": name,
        "full_name": f"{owner}/{name}",
        "description": f"The {name} project",
        "html_url": f"https://github.com/{owner}/{name}",
        "stargazers_count": 100,
        "forks_count": 10,
        "watchers_count": 100,
        "language": "Python",
        "topics": [],
        "size": 42,
        "created_at": "2024-05-01T12:00:00Z",
        "updated_at": "2024-06-01T12:00:00Z",
        "owner": {"login": owner, "avatar_url": f"https://avatars.example/{owner}.png"},
    }
    item.update(overrides)
    return item


def make_response(status_code=200, json_data=None, headers=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data if json_data is not None else {}
    response.headers = headers or {}
    response.text = text
    return response


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def repo_factory():
    def factory(repo_id=1, name="repo", **overrides):
        return Repository.from_api(make_item(repo_id, name, **overrides))
    return factory


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def session():
    """Mocked requests session."""
    return MagicMock()


@pytest.fixture
def response_factory():
    return make_response
