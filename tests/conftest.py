import os

import pytest

# Set environment variables for tests before any imports happen
os.environ["JOBLY_DB_PATH"] = ":memory:"
os.environ["JOBLY_LOG_LEVEL"] = "DEBUG"

from jobly.db import Database  # noqa: E402
from jobly.managers.company import Company  # noqa: E402
from jobly.managers.job import Job  # noqa: E402

COMPANIES = [
    ("c1", "C1", 1, "Desc1", "http://c1.img"),
    ("c2", "C2", 2, "Desc2", "http://c2.img"),
    ("c3", "C3", 3, "Desc3", "http://c3.img"),
]

JOBS = [
    ("t1", 100, "0.1", "c1"),
    ("t2", 200, "0.2", "c2"),
    ("t3", 300, "0.3", "c3"),
]


@pytest.fixture
def empty_db():
    """An in-memory database with the schema but no rows."""
    with Database(db_path=":memory:") as test_db:
        yield test_db


@pytest.fixture
def db(empty_db):
    """An in-memory database seeded with companies c1-c3 and jobs t1-t3 (ids 1-3)."""
    conn = empty_db.connection
    conn.executemany(
        "INSERT INTO companies (handle, name, num_employees, description, logo_url) "
        "VALUES (?, ?, ?, ?, ?)",
        COMPANIES,
    )
    conn.executemany(
        "INSERT INTO jobs (title, salary, equity, company_handle) VALUES (?, ?, ?, ?)",
        JOBS,
    )
    return empty_db


@pytest.fixture
def companies(db):
    return Company(db)


@pytest.fixture
def jobs(db):
    return Job(db)


@pytest.fixture
def db_file(tmp_path):
    """A seeded SQLite file, for code that opens its own Database."""
    path = str(tmp_path / "jobly.db")
    with Database(db_path=path) as file_db:
        file_db.connection.executemany(
            "INSERT INTO companies (handle, name, num_employees, description, logo_url) "
            "VALUES (?, ?, ?, ?, ?)",
            COMPANIES,
        )
        file_db.connection.executemany(
            "INSERT INTO jobs (title, salary, equity, company_handle) VALUES (?, ?, ?, ?)",
            JOBS,
        )
    return path
