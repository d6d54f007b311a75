import sqlite3

import pytest

from jobly.db import Database


def test_init_db(empty_db):
    """Test that both tables are created."""
    cursor = empty_db.connection.cursor()
    cursor.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
    tables = {row[0] for row in cursor.fetchall()}
    assert {"companies", "jobs"} <= tables


def test_init_db_called_twice_is_safe(db):
    """Test that calling init_db() a second time doesn't destroy existing data."""
    db.init_db()
    assert db.query("SELECT COUNT(*) AS n FROM companies") == [{"n": 3}]


def test_schema_columns(empty_db):
    """Test the storage column names of both tables."""
    cursor = empty_db.connection.cursor()
    cursor.execute("PRAGMA table_info(companies)")
    assert {row[1] for row in cursor.fetchall()} == {
        "handle",
        "name",
        "num_employees",
        "description",
        "logo_url",
    }
    cursor.execute("PRAGMA table_info(jobs)")
    assert {row[1] for row in cursor.fetchall()} == {
        "id",
        "title",
        "salary",
        "equity",
        "company_handle",
    }


def test_foreign_keys_enabled(empty_db):
    assert empty_db.query("PRAGMA foreign_keys") == [{"foreign_keys": 1}]


def test_job_requires_existing_company(empty_db):
    """Test that the store rejects a job for an unknown company."""
    with pytest.raises(sqlite3.IntegrityError):
        empty_db.query(
            "INSERT INTO jobs (title, company_handle) VALUES (?1, ?2)", ["t", "nope"]
        )


def test_equity_range_checked(db):
    with pytest.raises(sqlite3.IntegrityError):
        db.query("UPDATE jobs SET equity = ?1 WHERE id = ?2", ["1.5", 1])


def test_handle_must_be_lowercase(empty_db):
    with pytest.raises(sqlite3.IntegrityError):
        empty_db.query(
            "INSERT INTO companies (handle, name, description) VALUES (?1, ?2, ?3)",
            ["Upper", "U", "d"],
        )


def test_casefold_function_registered(empty_db):
    rows = empty_db.query(
        "SELECT casefold(?1) AS folded, casefold(NULL) AS missing", ["ÉCOLE Straße"]
    )
    assert rows == [{"folded": "école strasse", "missing": None}]


def test_query_returns_rows_as_dicts(db):
    rows = db.query('SELECT handle, num_employees AS "numEmployees" FROM companies ORDER BY handle')
    assert rows[0] == {"handle": "c1", "numEmployees": 1}
    assert len(rows) == 3


def test_numbered_parameters_bind_by_position(db):
    """Test that ?N placeholders bind to the Nth value regardless of text order."""
    rows = db.query(
        "SELECT handle FROM companies WHERE num_employees <= ?2 AND num_employees >= ?1 "
        "ORDER BY handle",
        [2, 3],
    )
    assert rows == [{"handle": "c2"}, {"handle": "c3"}]


@pytest.mark.asyncio
async def test_execute_returns_returning_rows(db):
    rows = await db.execute(
        "UPDATE companies SET name = ?1 WHERE handle = ?2 RETURNING handle, name",
        ["Renamed", "c1"],
    )
    assert rows == [{"handle": "c1", "name": "Renamed"}]


@pytest.mark.asyncio
async def test_execute_statement_without_rows(db):
    assert await db.execute("DELETE FROM jobs WHERE id = ?1", [1]) == []
    assert db.query("SELECT COUNT(*) AS n FROM jobs") == [{"n": 2}]


def test_context_manager_closes_connection():
    """Test that the context manager properly closes the connection on exit."""
    with Database(db_path=":memory:") as test_db:
        conn = test_db.connection
        assert conn is not None

    # After exiting the context manager, _conn should be None
    assert test_db._conn is None


def test_close_method():
    """Test that close() sets _conn to None and can be called safely."""
    test_db = Database(db_path=":memory:")
    assert test_db._conn is not None

    test_db.close()
    assert test_db._conn is None

    # Calling close() again should not raise
    test_db.close()
    assert test_db._conn is None


def test_connection_after_close_raises():
    test_db = Database(db_path=":memory:")
    test_db.close()
    with pytest.raises(RuntimeError, match="closed"):
        _ = test_db.connection


def test_file_database_persists(tmp_path):
    """Test that rows written through one Database are visible to the next."""
    db_path = str(tmp_path / "jobly.db")
    with Database(db_path=db_path) as first:
        first.query(
            "INSERT INTO companies (handle, name, description) VALUES (?1, ?2, ?3)",
            ["c1", "C1", "d"],
        )

    with Database(db_path=db_path) as second:
        assert second.query("SELECT handle FROM companies") == [{"handle": "c1"}]
