import logging
from collections.abc import Mapping
from typing import Any

from jobly.managers.base import EntityManager, Executor, RelationLoader, Row
from jobly.managers.company import PUBLIC_FIELDS as COMPANY_FIELDS
from jobly.models import JobFilter, JobNew, JobUpdate, parse
from jobly.sql import WhereClause, placeholder, sql_for_partial_update

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# Job fields share their column names.
COLUMN_NAMES: Mapping[str, str] = {}


async def attach_company(db: Executor, job: Row) -> Row:
    """
    Replace the job's companyHandle with the owning company's public fields.
    company is None if the company disappeared between the two reads.
    """
    handle = job.pop("companyHandle")
    rows = await db.execute(
        f"SELECT {COMPANY_FIELDS} FROM companies WHERE handle = ?1", [handle]
    )
    job["company"] = rows[0] if rows else None
    return job


def build_job_search(filters: Mapping[str, Any] | None) -> tuple[str, list[Any]]:
    """
    Build the job listing query for the given search filters.

    Recognized filters (all optional):
    - title (case-insensitive, partial match)
    - minSalary
    - hasEquity (True returns only jobs with equity > 0, other values are ignored)
    """
    search = parse(JobFilter, filters).sparse()

    where = WhereClause()
    if "title" in search:
        where.ilike("j.title", search["title"])
    if "minSalary" in search:
        where.compare("j.salary", ">=", search["minSalary"])
    if search.get("hasEquity") is True:
        where.literal("CAST(j.equity AS REAL) > 0")

    where_sql, params = where.render()
    sql = (
        'SELECT j.id, j.title, j.salary, j.equity, j.company_handle AS "companyHandle", '
        'c.name AS "companyName" '
        "FROM jobs AS j LEFT JOIN companies AS c ON c.handle = j.company_handle"
        f"{where_sql} ORDER BY j.title, j.id"
    )
    return sql, params


class Job(EntityManager):
    """Related functions for jobs."""

    entity = "job"

    def __init__(self, db: Executor, company_loader: RelationLoader = attach_company) -> None:
        super().__init__(db)
        self.company_loader = company_loader

    async def create(self, data: Mapping[str, Any]) -> Row:
        """
        Create a job from data and return it.

        data should be { title, salary, equity, companyHandle }

        Returns { id, title, salary, equity, companyHandle }
        """
        job = parse(JobNew, data)
        rows = await self.db.execute(
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES (?1, ?2, ?3, ?4)
                RETURNING {PUBLIC_FIELDS}""",
            [job.title, job.salary, job.equity, job.company_handle],
        )
        created = rows[0]
        logger.info(f"Created job {created['id']} for {job.company_handle}")
        return created

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[Row]:
        """
        Find all jobs matching the optional filters, ordered by title.

        Returns [{ id, title, salary, equity, companyHandle, companyName }, ...]
        """
        sql, params = build_job_search(filters)
        return await self.db.execute(sql, params)

    async def get(self, job_id: int) -> Row:
        """
        Given a job id, return data about the job.

        Returns { id, title, salary, equity, company }
          where company is { handle, name, description, numEmployees, logoUrl }

        Throws NotFoundError if not found.
        """
        return await self.read_then_enrich(
            f"SELECT {PUBLIC_FIELDS} FROM jobs WHERE id = ?1", job_id, self.company_loader
        )

    async def update(self, job_id: int, data: Mapping[str, Any]) -> Row:
        """
        Partial update: only the provided fields change.

        Data can include: { title, salary, equity }

        Returns { id, title, salary, equity, companyHandle }

        Throws NotFoundError if not found, BadRequestError if data is empty.
        """
        changes = parse(JobUpdate, data).sparse()
        set_cols, values = sql_for_partial_update(changes, COLUMN_NAMES)
        id_idx = placeholder(len(values) + 1)

        sql = f"""UPDATE jobs
                  SET {set_cols}
                  WHERE id = {id_idx}
                  RETURNING {PUBLIC_FIELDS}"""
        job = await self.fetch_one(sql, [*values, job_id], job_id)
        logger.info(f"Updated job {job_id}: {', '.join(changes)}")
        return job

    async def remove(self, job_id: int) -> None:
        """
        Delete the given job.

        Throws NotFoundError if the job is not found.
        """
        await self.fetch_one("DELETE FROM jobs WHERE id = ?1 RETURNING id", [job_id], job_id)
        logger.info(f"Removed job {job_id}")
