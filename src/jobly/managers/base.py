from collections.abc import Sequence
from typing import Any, Protocol

from jobly.errors import NotFoundError

Row = dict[str, Any]


class Executor(Protocol):
    """Anything that runs one parameterized statement and returns its rows."""

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> list[Row]: ...


class RelationLoader(Protocol):
    """
    Second step of a single-entity read: receives the primary row and returns
    it with the related data attached.
    """

    async def __call__(self, db: Executor, row: Row) -> Row: ...


class EntityManager:
    """
    Shared plumbing for the entity managers.
    Subclasses supply the SQL; this class owns the not-found handling.
    """

    entity = "row"

    def __init__(self, db: Executor) -> None:
        self.db = db

    def not_found(self, key: Any) -> NotFoundError:
        return NotFoundError(f"No {self.entity}: {key}")

    async def fetch_one(self, sql: str, params: Sequence[Any], key: Any) -> Row:
        """Run a statement expected to touch exactly one row, or raise NotFoundError."""
        rows = await self.db.execute(sql, params)
        if not rows:
            raise self.not_found(key)
        return rows[0]

    async def read_then_enrich(
        self, sql: str, key: Any, loader: RelationLoader
    ) -> Row:
        row = await self.fetch_one(sql, [key], key)
        return await loader(self.db, row)
