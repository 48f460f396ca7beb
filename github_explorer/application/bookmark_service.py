"""Application service for bookmarking repositories."""

import json
import logging
from typing import List

logger = logging.getLogger(__name__)


class BookmarkService:
    """Keeps the bookmarked repository ids mirrored in a key-value store.

    The list is read once when the service is created and written back in
    full on every toggle.
    """

    STORAGE_KEY = "github-bookmarks"

    def __init__(self, store):
        """
        Initialize bookmark service.

        Args:
            store: Key-value store with ``get(key)`` and ``set(key, value)``
        """
        self.store = store
        self._bookmarks: List[int] = self._load()

    def _load(self) -> List[int]:
        raw = self.store.get(self.STORAGE_KEY)
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable bookmarks under {self.STORAGE_KEY!r}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring bookmarks under {self.STORAGE_KEY!r}: expected a list, got {type(data).__name__}")
            return []

        bookmarks = []
        for value in data:
            if isinstance(value, int) and not isinstance(value, bool) and value not in bookmarks:
                bookmarks.append(value)
        logger.info(f"Loaded {len(bookmarks)} bookmarks")
        return bookmarks

    def _save(self):
        self.store.set(self.STORAGE_KEY, json.dumps(self._bookmarks))

    @property
    def bookmarks(self) -> List[int]:
        return list(self._bookmarks)

    def is_bookmarked(self, repo_id: int) -> bool:
        return repo_id in self._bookmarks

    def toggle(self, repo_id: int) -> bool:
        """
        Add or remove a repository from the bookmarks.

        Returns:
            True if the repository is bookmarked after the call
        """
        if self.is_bookmarked(repo_id):
            updated = [bookmark for bookmark in self._bookmarks if bookmark != repo_id]
        else:
            updated = self._bookmarks + [repo_id]

        previous = self._bookmarks
        self._bookmarks = updated
        try:
            self._save()
        except Exception:
            self._bookmarks = previous
            raise

        bookmarked = repo_id in updated
        logger.info(f"Repository {repo_id} {'bookmarked' if bookmarked else 'removed from bookmarks'}")
        return bookmarked
