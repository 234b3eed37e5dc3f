"""Tests for folio.data: typed async database access and migrations."""

from dataclasses import dataclass
from typing import Any

import pytest

from folio.data import Database, DataError, MigrationError, QueryError, migrate
from folio.data._mapping import map_row, map_rows
from folio.data._sqlite import SQLiteConnection
from folio.data.migrate import discover_migrations

# -- Test models --


@dataclass(frozen=True, slots=True)
class Note:
    id: int
    title: str
    pinned: bool = False


@dataclass(frozen=True, slots=True)
class Doc:
    id: int
    body: dict[str, Any]
    tags: list[str] | None = None


# -- Fixtures --


@pytest.fixture
async def db(tmp_path):
    """A fresh SQLite database with a notes table."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    await db.connect()
    await db.execute(
        "CREATE TABLE notes ("
        "  id INTEGER PRIMARY KEY AUTOINCREMENT,"
        "  title TEXT NOT NULL,"
        "  pinned INTEGER NOT NULL DEFAULT 0"
        ")"
    )
    yield db
    await db.disconnect()


@pytest.fixture
def migrations_dir(tmp_path):
    path = tmp_path / "migrations"
    path.mkdir()
    (path / "001_create_a.sql").write_text("CREATE TABLE a (id INTEGER PRIMARY KEY);")
    (path / "002_create_b.sql").write_text("CREATE TABLE b (id INTEGER PRIMARY KEY);")
    return path


# =============================================================================
# URLs and lifecycle
# =============================================================================


class TestConnection:
    def test_unsupported_url(self) -> None:
        with pytest.raises(DataError, match="Unsupported database URL"):
            Database("postgresql://localhost/db")

    def test_url_kept(self) -> None:
        assert Database("sqlite:///:memory:").url == "sqlite:///:memory:"

    async def test_connects_on_first_query(self, tmp_path) -> None:
        db = Database(f"sqlite:///{tmp_path / 'lazy.db'}")
        assert not db.connected
        assert await db.fetch_val("SELECT 1") == 1
        assert db.connected
        await db.disconnect()
        assert not db.connected

    async def test_context_manager(self) -> None:
        async with Database("sqlite:///:memory:") as db:
            assert db.connected
        assert not db.connected


# =============================================================================
# Queries
# =============================================================================


class TestQueries:
    async def test_insert_returns_id(self, db: Database) -> None:
        first = await db.insert("INSERT INTO notes (title) VALUES (?)", "one")
        second = await db.insert("INSERT INTO notes (title) VALUES (?)", "two")
        assert second == first + 1

    async def test_fetch_maps_dataclasses(self, db: Database) -> None:
        await db.insert("INSERT INTO notes (title, pinned) VALUES (?, ?)", "a", 1)
        await db.insert("INSERT INTO notes (title) VALUES (?)", "b")
        notes = await db.fetch(Note, "SELECT * FROM notes ORDER BY id")
        assert [n.title for n in notes] == ["a", "b"]
        assert notes[0].pinned is True
        assert notes[1].pinned is False

    async def test_fetch_one_missing(self, db: Database) -> None:
        assert await db.fetch_one(Note, "SELECT * FROM notes WHERE id = ?", 99) is None

    async def test_fetch_dicts(self, db: Database) -> None:
        await db.insert("INSERT INTO notes (title) VALUES (?)", "a")
        rows = await db.fetch_dicts("SELECT title FROM notes")
        assert rows == [{"title": "a"}]

    async def test_execute_returns_rowcount(self, db: Database) -> None:
        await db.insert("INSERT INTO notes (title) VALUES (?)", "a")
        await db.insert("INSERT INTO notes (title) VALUES (?)", "b")
        assert await db.execute("UPDATE notes SET pinned = 1") == 2
        assert await db.execute("DELETE FROM notes WHERE id = ?", 999) == 0

    async def test_fetch_val(self, db: Database) -> None:
        assert await db.fetch_val("SELECT COUNT(*) FROM notes") == 0

    async def test_bad_sql_raises_query_error(self, db: Database) -> None:
        with pytest.raises(QueryError):
            await db.fetch_dicts("SELECT * FROM missing_table")

    async def test_echo_logs_statements(self, tmp_path, caplog: pytest.LogCaptureFixture) -> None:
        db = Database(f"sqlite:///{tmp_path / 'echo.db'}", echo=True)
        with caplog.at_level("INFO", logger="folio.data"):
            await db.fetch_val("SELECT ?", 5)
        await db.disconnect()
        assert "SELECT ?" in caplog.text
        assert "params=(5,)" in caplog.text


# =============================================================================
# Transactions
# =============================================================================


class TestTransactions:
    async def test_commit(self, db: Database) -> None:
        async with db.transaction():
            await db.insert("INSERT INTO notes (title) VALUES (?)", "a")
            await db.insert("INSERT INTO notes (title) VALUES (?)", "b")
        assert await db.fetch_val("SELECT COUNT(*) FROM notes") == 2

    async def test_rollback_on_error(self, db: Database) -> None:
        with pytest.raises(RuntimeError):
            async with db.transaction():
                await db.insert("INSERT INTO notes (title) VALUES (?)", "a")
                raise RuntimeError("abort")
        assert await db.fetch_val("SELECT COUNT(*) FROM notes") == 0

    async def test_nested_joins_outer(self, db: Database) -> None:
        with pytest.raises(RuntimeError):
            async with db.transaction():
                async with db.transaction():
                    await db.insert("INSERT INTO notes (title) VALUES (?)", "inner")
                raise RuntimeError("abort outer")
        assert await db.fetch_val("SELECT COUNT(*) FROM notes") == 0


# =============================================================================
# SQLite connection
# =============================================================================


@pytest.fixture
async def conn(tmp_path):
    conn = await SQLiteConnection.open(str(tmp_path / "raw.db"))
    await conn.script("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT);")
    yield conn
    await conn.close()


class TestSQLiteConnection:
    async def test_run_reports_rowcount_and_id(self, conn: SQLiteConnection) -> None:
        assert await conn.run("INSERT INTO t (name) VALUES (?)", ("a",)) == (1, 1)
        rowcount, _ = await conn.run("UPDATE t SET name = ?", ("b",))
        assert rowcount == 1

    async def test_rows_are_dicts(self, conn: SQLiteConnection) -> None:
        await conn.run("INSERT INTO t (name) VALUES (?)", ("a",))
        await conn.run("INSERT INTO t (name) VALUES (?)", ("b",))
        assert await conn.rows("SELECT name FROM t ORDER BY id") == [{"name": "a"}, {"name": "b"}]
        assert await conn.rows("SELECT name FROM t ORDER BY id", limit=1) == [{"name": "a"}]

    async def test_foreign_keys_enabled(self, conn: SQLiteConnection) -> None:
        assert await conn.rows("PRAGMA foreign_keys") == [{"foreign_keys": 1}]

    async def test_rollback_restores_autocommit(self, conn: SQLiteConnection) -> None:
        await conn.begin()
        await conn.run("INSERT INTO t (name) VALUES (?)", ("gone",))
        await conn.rollback()
        await conn.run("INSERT INTO t (name) VALUES (?)", ("kept",))
        assert await conn.rows("SELECT name FROM t") == [{"name": "kept"}]


# =============================================================================
# Row mapping
# =============================================================================


class TestMapping:
    def test_ignores_extra_columns(self) -> None:
        note = map_row(Note, {"id": 1, "title": "x", "pinned": 0, "extra": "ignored"})
        assert note == Note(id=1, title="x", pinned=False)

    def test_decodes_json_fields(self) -> None:
        doc = map_row(Doc, {"id": 1, "body": '{"a": 1}', "tags": '["x"]'})
        assert doc.body == {"a": 1}
        assert doc.tags == ["x"]

    def test_none_stays_none(self) -> None:
        assert map_row(Doc, {"id": 1, "body": "{}", "tags": None}).tags is None

    def test_rejects_non_dataclass(self) -> None:
        with pytest.raises(TypeError, match="not a dataclass"):
            map_row(dict, {"id": 1})

    def test_map_rows(self) -> None:
        rows = [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}]
        assert [n.id for n in map_rows(Note, rows)] == [1, 2]


# =============================================================================
# Migrations
# =============================================================================


class TestMigrations:
    async def test_applies_in_order(self, migrations_dir) -> None:
        async with Database("sqlite:///:memory:") as db:
            result = await migrate(db, migrations_dir)
            assert result.applied == ["001_create_a", "002_create_b"]
            assert result.already_applied == 0
            assert result.total_available == 2
            assert await db.fetch_val("SELECT COUNT(*) FROM b") == 0

    async def test_second_run_is_noop(self, migrations_dir) -> None:
        async with Database("sqlite:///:memory:") as db:
            await migrate(db, migrations_dir)
            result = await migrate(db, migrations_dir)
        assert result.applied == []
        assert result.summary == "Already up to date (2 migrations applied)"

    async def test_applies_only_new_files(self, migrations_dir) -> None:
        async with Database("sqlite:///:memory:") as db:
            await migrate(db, migrations_dir)
            (migrations_dir / "003_create_c.sql").write_text("CREATE TABLE c (id INTEGER);")
            result = await migrate(db, migrations_dir)
        assert result.applied == ["003_create_c"]
        assert result.summary == "Applied 1 migration(s): 003_create_c"

    async def test_failure_stops_run(self, migrations_dir) -> None:
        (migrations_dir / "003_broken.sql").write_text("CREATE TABLE oops (")
        (migrations_dir / "004_after.sql").write_text("CREATE TABLE after (id INTEGER);")
        async with Database("sqlite:///:memory:") as db:
            with pytest.raises(MigrationError, match="003_broken"):
                await migrate(db, migrations_dir)
            tables = await db.fetch_dicts(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'after'"
            )
        assert tables == []

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(MigrationError, match="does not exist"):
            discover_migrations(tmp_path / "nope")

    def test_bad_filename(self, tmp_path) -> None:
        (tmp_path / "create.sql").write_text("SELECT 1;")
        with pytest.raises(MigrationError, match="Invalid migration filename"):
            discover_migrations(tmp_path)

    def test_duplicate_versions(self, tmp_path) -> None:
        (tmp_path / "001_a.sql").write_text("SELECT 1;")
        (tmp_path / "1_b.sql").write_text("SELECT 1;")
        with pytest.raises(MigrationError, match="Duplicate"):
            discover_migrations(tmp_path)

    def test_empty_file(self, tmp_path) -> None:
        (tmp_path / "001_empty.sql").write_text("  \n")
        with pytest.raises(MigrationError, match="Empty migration"):
            discover_migrations(tmp_path)

    async def test_packaged_schema(self) -> None:
        from folio.config import SiteConfig

        async with Database("sqlite:///:memory:") as db:
            result = await migrate(db, SiteConfig().migrations_dir)
            columns = await db.fetch_dicts("PRAGMA table_info(entries)")
        assert result.applied == ["001_create_entries", "002_create_canvases"]
        assert {c["name"] for c in columns} == {
            "id",
            "type",
            "content",
            "created_at",
            "updated_at",
            "published",
            "metadata",
            "position_index",
        }
