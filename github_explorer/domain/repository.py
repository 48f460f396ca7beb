"""Domain entities for GitHub repositories."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


SORT_KEYS = ("stars", "forks", "updated")
SORT_ORDERS = ("desc", "asc")

LANGUAGES = [
    "All", "JavaScript", "TypeScript", "Python", "Java", "Go", "Rust",
    "C++", "C#", "PHP", "Ruby", "Swift", "Kotlin", "Dart", "Scala",
]

SORT_OPTIONS = [
    ("stars", "Most Stars"),
    ("updated", "Recently Updated"),
    ("forks", "Most Forks"),
]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp ("2024-01-01T00:00:00Z")."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class Owner:
    """Repository owner as shown on a card."""

    login: str
    avatar_url: str = ""


@dataclass(frozen=True)
class Repository:
    """Immutable repository entity."""

    id: int
    name: str
    full_name: str
    html_url: str
    owner: Owner
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    description: Optional[str] = None
    language: Optional[str] = None
    topics: Tuple[str, ...] = ()
    size: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Repository":
        """
        Build a repository from a REST API item.

        Args:
            item: One element of a search response's ``items`` or a
                ``/repos/{owner}/{repo}`` body
        """
        owner = item.get("owner") or {}
        full_name = item.get("full_name") or ""
        login = owner.get("login") or full_name.split("/", 1)[0]

        return cls(
            id=int(item["id"]),
            name=item.get("name") or full_name.split("/")[-1],
            full_name=full_name,
            html_url=item.get("html_url") or "",
            owner=Owner(login=login, avatar_url=owner.get("avatar_url") or ""),
            stars=item.get("stargazers_count") or 0,
            forks=item.get("forks_count") or 0,
            watchers=item.get("watchers_count") or 0,
            description=item.get("description"),
            language=item.get("language"),
            topics=tuple(item.get("topics") or ()),
            size=item.get("size") or 0,
            created_at=parse_timestamp(item.get("created_at")),
            updated_at=parse_timestamp(item.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        """Flat, serializable view used by exports."""
        return {
            "id": self.id,
            "name": self.name,
            "owner": self.owner.login,
            "full_name": self.full_name,
            "description": self.description or "",
            "stars": self.stars,
            "forks": self.forks,
            "watchers": self.watchers,
            "language": self.language or "",
            "topics": " ".join(self.topics),
            "url": self.html_url,
            "created_at": self.created_at.isoformat() if self.created_at else "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else "",
        }


@dataclass(frozen=True)
class SearchResponse:
    """One page of search results."""

    total_count: int
    incomplete_results: bool
    items: List[Repository] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SearchResponse":
        return cls(
            total_count=data.get("total_count", 0),
            incomplete_results=data.get("incomplete_results", False),
            items=[Repository.from_api(item) for item in data.get("items", [])],
        )


@dataclass(frozen=True)
class SearchParams:
    """Parameters of a repository search request."""

    query: str = ""
    language: str = ""
    sort: str = "stars"
    order: str = "desc"
    per_page: int = 30
    page: int = 1

    def __post_init__(self):
        if self.sort not in SORT_KEYS:
            raise ValueError(f"Invalid sort key: {self.sort!r} (expected one of {SORT_KEYS})")
        if self.order not in SORT_ORDERS:
            raise ValueError(f"Invalid sort order: {self.order!r} (expected one of {SORT_ORDERS})")
        if not 1 <= self.per_page <= 100:
            raise ValueError(f"per_page must be between 1 and 100, got {self.per_page}")
        if self.page < 1:
            raise ValueError(f"page must be positive, got {self.page}")
