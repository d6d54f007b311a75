import logging
from collections.abc import Mapping
from typing import Any

from jobly.errors import BadRequestError
from jobly.managers.base import EntityManager, Executor, RelationLoader, Row
from jobly.models import CompanyFilter, CompanyNew, CompanyUpdate, parse
from jobly.sql import WhereClause, placeholder, sql_for_partial_update

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'

COLUMN_NAMES: Mapping[str, str] = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


async def attach_jobs(db: Executor, company: Row) -> Row:
    """Attach the company's jobs as a nested list."""
    company["jobs"] = await db.execute(
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = ?1
           ORDER BY id""",
        [company["handle"]],
    )
    return company


def build_company_search(filters: Mapping[str, Any] | None) -> tuple[str, list[Any]]:
    """
    Build the company listing query for the given search filters.

    Recognized filters (all optional):
    - minEmployees
    - maxEmployees
    - name (case-insensitive, partial match)

    Raises BadRequestError if minEmployees > maxEmployees.
    """
    search = parse(CompanyFilter, filters).sparse()
    min_employees = search.get("minEmployees")
    max_employees = search.get("maxEmployees")

    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("Minimum employees cannot be greater than maximum employees.")

    where = WhereClause()
    if "minEmployees" in search:
        where.compare("num_employees", ">=", min_employees)
    if "maxEmployees" in search:
        where.compare("num_employees", "<=", max_employees)
    if "name" in search:
        where.ilike("name", search["name"])

    where_sql, params = where.render()
    sql = f"SELECT {PUBLIC_FIELDS} FROM companies{where_sql} ORDER BY name"
    return sql, params


class Company(EntityManager):
    """Related functions for companies."""

    entity = "company"

    def __init__(self, db: Executor, jobs_loader: RelationLoader = attach_jobs) -> None:
        super().__init__(db)
        self.jobs_loader = jobs_loader

    async def create(self, data: Mapping[str, Any]) -> Row:
        """
        Create a company from data and return it.

        data should be { handle, name, description, numEmployees, logoUrl }

        Returns { handle, name, description, numEmployees, logoUrl }

        Throws BadRequestError if the payload is invalid or the company already exists.
        """
        company = parse(CompanyNew, data)

        duplicate_check = await self.db.execute(
            "SELECT handle FROM companies WHERE handle = ?1", [company.handle]
        )
        if duplicate_check:
            raise BadRequestError(f"Duplicate company: {company.handle}")

        rows = await self.db.execute(
            f"""INSERT INTO companies
                (handle, name, description, num_employees, logo_url)
                VALUES (?1, ?2, ?3, ?4, ?5)
                RETURNING {PUBLIC_FIELDS}""",
            [
                company.handle,
                company.name,
                company.description,
                company.num_employees,
                company.logo_url,
            ],
        )
        logger.info(f"Created company {company.handle}")
        return rows[0]

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[Row]:
        """
        Find all companies matching the optional filters, ordered by name.

        Returns [{ handle, name, description, numEmployees, logoUrl }, ...]
        """
        sql, params = build_company_search(filters)
        return await self.db.execute(sql, params)

    async def get(self, handle: str) -> Row:
        """
        Given a company handle, return data about the company.

        Returns { handle, name, description, numEmployees, logoUrl, jobs }
          where jobs is [{ id, title, salary, equity }, ...]

        Throws NotFoundError if not found.
        """
        return await self.read_then_enrich(
            f"SELECT {PUBLIC_FIELDS} FROM companies WHERE handle = ?1",
            handle,
            self.jobs_loader,
        )

    async def update(self, handle: str, data: Mapping[str, Any]) -> Row:
        """
        Partial update: only the provided fields change.

        Data can include: { name, description, numEmployees, logoUrl }

        Returns { handle, name, description, numEmployees, logoUrl }

        Throws NotFoundError if not found, BadRequestError if data is empty.
        """
        changes = parse(CompanyUpdate, data).sparse()
        set_cols, values = sql_for_partial_update(changes, COLUMN_NAMES)
        handle_idx = placeholder(len(values) + 1)

        sql = f"""UPDATE companies
                  SET {set_cols}
                  WHERE handle = {handle_idx}
                  RETURNING {PUBLIC_FIELDS}"""
        company = await self.fetch_one(sql, [*values, handle], handle)
        logger.info(f"Updated company {handle}: {', '.join(changes)}")
        return company

    async def remove(self, handle: str) -> None:
        """
        Delete the given company; its jobs go with it.

        Throws NotFoundError if the company is not found.
        """
        await self.fetch_one(
            "DELETE FROM companies WHERE handle = ?1 RETURNING handle", [handle], handle
        )
        logger.info(f"Removed company {handle}")
