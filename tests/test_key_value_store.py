"""Tests for the key-value stores."""

import json
import os
import threading
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from github_explorer.infrastructure.key_value_store import (
    FileKeyValueStore,
    PostgresKeyValueStore,
    copy_keys,
    create_store,
)


class TestFileKeyValueStore:
    """JSON file backend."""

    def test_missing_file(self, tmp_path):
        assert FileKeyValueStore(str(tmp_path / "none.json")).get("k") is None

    def test_set_creates_parent_directories(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path / "nested" / "storage.json"))

        store.set("k", "v")

        assert store.get("k") == "v"
        assert not (tmp_path / "nested" / "storage.json.tmp").exists()

    def test_set_keeps_other_keys(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path / "storage.json"))
        store.set("a", "1")
        store.set("b", "2")
        store.set("a", "3")

        assert (store.get("a"), store.get("b")) == ("3", "2")

    def test_path_from_environment(self, tmp_path):
        with patch.dict(os.environ, {"BOOKMARKS_PATH": str(tmp_path / "env.json")}):
            store = FileKeyValueStore()
        assert store.path == tmp_path / "env.json"

    @pytest.mark.parametrize("content", ["[1, 2]", "{not json", ""])
    def test_unreadable_file_treated_as_empty(self, tmp_path, content, caplog):
        path = tmp_path / "storage.json"
        path.write_text(content, encoding="utf-8")
        store = FileKeyValueStore(str(path))

        assert store.get("k") is None
        assert "Ignoring" in caplog.text

        store.set("k", "v")
        assert store.get("k") == "v"

    def test_concurrent_writers_keep_every_key(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path / "storage.json"))
        errors = []

        def write(worker):
            for i in range(50):
                try:
                    store.set(f"w{worker}-k{i}", str(i))
                except Exception as e:
                    errors.append(repr(e))

        threads = [threading.Thread(target=write, args=(worker,)) for worker in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        data = json.loads((tmp_path / "storage.json").read_text(encoding="utf-8"))
        assert len(data) == 200
        assert not list(tmp_path.glob("*.tmp"))


@pytest.fixture
def pg_store():
    """Postgres store wired to a mocked connection pool."""
    store = PostgresKeyValueStore("host=localhost dbname=test")
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value
    store.pool = MagicMock()
    store.pool.getconn.return_value = conn
    return store, conn, cursor


class TestPostgresKeyValueStore:
    """PostgreSQL backend."""

    def test_connection_string_from_environment(self):
        env = {
            "POSTGRES_HOST": "db",
            "POSTGRES_PORT": "6543",
            "POSTGRES_DB": "explorer",
            "POSTGRES_USER": "me",
            "POSTGRES_PASSWORD": "secret",
        }
        with patch.dict(os.environ, env):
            store = PostgresKeyValueStore()
        assert store.connection_string == "host=db port=6543 dbname=explorer user=me password=secret"

    def test_get(self, pg_store):
        store, conn, cursor = pg_store
        cursor.fetchone.return_value = ("[1]",)

        assert store.get("github-bookmarks") == "[1]"
        assert cursor.execute.call_args.args[1] == ("github-bookmarks",)
        store.pool.putconn.assert_called_once_with(conn)

    def test_get_missing(self, pg_store):
        store, _, cursor = pg_store
        cursor.fetchone.return_value = None
        assert store.get("k") is None

    def test_set_upserts_and_commits(self, pg_store):
        store, conn, cursor = pg_store

        store.set("k", "v")

        sql, values = cursor.execute.call_args.args
        assert "ON CONFLICT (key)" in sql
        assert values == ("k", "v")
        conn.commit.assert_called_once()
        store.pool.putconn.assert_called_once_with(conn)

    def test_set_rolls_back_on_error(self, pg_store):
        store, conn, cursor = pg_store
        cursor.execute.side_effect = psycopg2.OperationalError("gone")

        with pytest.raises(psycopg2.OperationalError):
            store.set("k", "v")

        conn.rollback.assert_called_once()
        store.pool.putconn.assert_called_once_with(conn)

    def test_initialize_schema(self, pg_store):
        store, conn, cursor = pg_store

        store.initialize_schema()

        assert "CREATE TABLE IF NOT EXISTS key_value_store" in cursor.execute.call_args.args[0]
        conn.commit.assert_called_once()

    def test_close(self, pg_store):
        store, _, _ = pg_store
        pool = store.pool

        store.close()

        pool.closeall.assert_called_once()
        assert store.pool is None


class TestCreateStore:
    """Backend selection."""

    def test_file_by_default(self, tmp_path):
        with patch.dict(os.environ, {"BOOKMARKS_PATH": str(tmp_path / "s.json")}):
            os.environ.pop("BOOKMARK_STORE", None)
            assert isinstance(create_store(), FileKeyValueStore)

    def test_postgres(self):
        with patch("github_explorer.infrastructure.key_value_store.ThreadedConnectionPool") as pool_cls:
            store = create_store("postgres")

        assert isinstance(store, PostgresKeyValueStore)
        pool_cls.return_value.getconn.return_value.commit.assert_called_once()

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store("redis")


class TestCopyKeys:
    """Moving bookmarks between backends."""

    def test_copies_present_keys(self, tmp_path, store):
        source = FileKeyValueStore(str(tmp_path / "storage.json"))
        source.set("github-bookmarks", "[1, 2]")

        copied = copy_keys(source, store, ["github-bookmarks", "missing"])

        assert copied == ["github-bookmarks"]
        assert store.writes == [("github-bookmarks", "[1, 2]")]

    def test_into_postgres(self, tmp_path, pg_store):
        target, conn, cursor = pg_store
        source = FileKeyValueStore(str(tmp_path / "storage.json"))
        source.set("github-bookmarks", "[7]")

        copy_keys(source, target, ["github-bookmarks"])

        assert cursor.execute.call_args.args[1] == ("github-bookmarks", "[7]")
        conn.commit.assert_called_once()
