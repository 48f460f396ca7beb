"""Key-value storage for small serialized values (bookmarks)."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import psycopg2
from psycopg2.pool import ThreadedConnectionPool

logger = logging.getLogger(__name__)


DEFAULT_STORAGE_PATH = Path.home() / ".github_explorer" / "storage.json"


class FileKeyValueStore:
    """String key-value store persisted as a single JSON object on disk.

    One instance may be shared between threads; writes are serialized.
    """

    def __init__(self, path: Optional[str] = None):
        """
        Initialize file store.

        Args:
            path: JSON file location. If None, uses BOOKMARKS_PATH env var or
                ~/.github_explorer/storage.json.
        """
        if path is None:
            path = os.getenv("BOOKMARKS_PATH", str(DEFAULT_STORAGE_PATH))
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        """Stored object; an unreadable file is treated as empty."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring storage file {self.path}: expected a JSON object, got {type(data).__name__}")
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str):
        with self._lock:
            data = self._read_all()
            data[key] = value

            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=self.path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            try:
                os.replace(f.name, self.path)
            except OSError:
                os.unlink(f.name)
                raise
        logger.debug(f"Wrote key {key!r} to {self.path}")

    def close(self):
        pass


class PostgresKeyValueStore:
    """Key-value store backed by a PostgreSQL table."""

    def __init__(self, connection_string: Optional[str] = None):
        """
        Initialize PostgreSQL store.

        Args:
            connection_string: PostgreSQL connection string. If None, uses env vars.
        """
        if connection_string is None:
            db_host = os.getenv("POSTGRES_HOST", "localhost")
            db_port = os.getenv("POSTGRES_PORT", "5432")
            db_name = os.getenv("POSTGRES_DB", "github_explorer")
            db_user = os.getenv("POSTGRES_USER", "postgres")
            db_password = os.getenv("POSTGRES_PASSWORD", "postgres")

            connection_string = (
                f"host={db_host} port={db_port} dbname={db_name} "
                f"user={db_user} password={db_password}"
            )

        self.connection_string = connection_string
        self.pool: Optional[ThreadedConnectionPool] = None

    def connect(self):
        """Initialize connection pool."""
        try:
            self.pool = ThreadedConnectionPool(1, 5, self.connection_string)
            logger.info("Database connection pool created")
        except psycopg2.Error as e:
            logger.error(f"Error creating connection pool: {e}")
            raise

    def close(self):
        """Close connection pool."""
        if self.pool:
            self.pool.closeall()
            self.pool = None
            logger.info("Database connection pool closed")

    def _get_connection(self):
        if not self.pool:
            self.connect()
        return self.pool.getconn()

    def _return_connection(self, conn):
        if self.pool:
            self.pool.putconn(conn)

    def initialize_schema(self):
        """Create the key-value table if it doesn't exist."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS key_value_store (
                        key VARCHAR(255) PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                    );
                """)
                conn.commit()
                logger.info("Database schema initialized")
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Error initializing schema: {e}")
            raise
        finally:
            self._return_connection(conn)

    def get(self, key: str) -> Optional[str]:
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT value FROM key_value_store WHERE key = %s", (key,))
                row = cur.fetchone()
                return row[0] if row else None
        except psycopg2.Error as e:
            logger.error(f"Error reading key {key!r}: {e}")
            raise
        finally:
            self._return_connection(conn)

    def set(self, key: str, value: str):
        """Insert or overwrite the value stored under ``key``."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO key_value_store (key, value) VALUES (%s, %s)
                    ON CONFLICT (key)
                    DO UPDATE SET
                        value = EXCLUDED.value,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (key, value),
                )
                conn.commit()
                logger.debug(f"Stored key {key!r}")
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Error storing key {key!r}: {e}")
            raise
        finally:
            self._return_connection(conn)


def create_store(backend: Optional[str] = None):
    """
    Create the configured store.

    Args:
        backend: "file" or "postgres". If None, uses BOOKMARK_STORE env var (default "file").
    """
    if backend is None:
        backend = os.getenv("BOOKMARK_STORE", "file")

    if backend == "file":
        return FileKeyValueStore()
    if backend == "postgres":
        store = PostgresKeyValueStore()
        store.connect()
        store.initialize_schema()
        return store
    raise ValueError(f"Unknown bookmark store backend: {backend!r}")


def copy_keys(source, target, keys: Iterable[str]) -> List[str]:
    """
    Copy values from one store to another, skipping keys absent in ``source``.

    Returns:
        Keys that were written to ``target``
    """
    copied = []
    for key in keys:
        value = source.get(key)
        if value is None:
            logger.info(f"Key {key!r} not present in source store, skipping")
            continue
        target.set(key, value)
        copied.append(key)
    return copied
