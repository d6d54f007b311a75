"""
Builders for dynamic, parameterized SQL.

Both builders only ever place values in the parameter list; the SQL text they
emit contains column names and numbered placeholders (``?1``, ``?2``, ...),
never caller data.
"""

from collections.abc import Mapping
from typing import Any

from jobly.errors import BadRequestError


def placeholder(index: int) -> str:
    """Numbered positional parameter, 1-based."""
    return f"?{index}"


def sql_for_partial_update(
    data: Mapping[str, Any], column_names: Mapping[str, str]
) -> tuple[str, list[Any]]:
    """
    Build the SET clause of an UPDATE from a sparse mapping of fields to values.

    column_names maps field names whose column differs from the key, e.g.
    {"numEmployees": "num_employees"}; other keys are used as-is.

    Returns the SET fragment and the values in placeholder order, e.g.
        ({"firstName": "Aliya", "age": 32}, {"firstName": "first_name"})
        -> ('"first_name"=?1, "age"=?2', ["Aliya", 32])

    The caller binds its identifying key at index len(values) + 1.
    Raises BadRequestError when data is empty.
    """
    if not data:
        raise BadRequestError("No data")

    cols = []
    values = []
    for index, (key, value) in enumerate(data.items(), start=1):
        column = column_names.get(key, key)
        cols.append(f'"{column}"={placeholder(index)}')
        values.append(value)

    return ", ".join(cols), values


_NO_PARAM = object()


class WhereClause:
    """
    Ordered collection of AND-joined predicates.

    Predicates keep a "{}" slot where their placeholder goes. Numbering happens
    once, in render(), so placeholder indices and parameter order always agree.
    """

    def __init__(self) -> None:
        self._predicates: list[tuple[str, Any]] = []

    def compare(self, column: str, op: str, value: Any) -> "WhereClause":
        if op not in (">=", "<="):
            raise ValueError(f"Unsupported comparison: {op}")
        self._predicates.append((f"{column} {op} {{}}", value))
        return self

    def ilike(self, column: str, text: str) -> "WhereClause":
        """Case-insensitive substring match, folding Unicode case on both sides."""
        self._predicates.append((f"casefold({column}) LIKE casefold({{}})", f"%{text}%"))
        return self

    def literal(self, sql: str) -> "WhereClause":
        """Predicate with no bound parameter."""
        self._predicates.append((sql, _NO_PARAM))
        return self

    def render(self) -> tuple[str, list[Any]]:
        """
        Return (" WHERE ...", params), or ("", []) when there are no predicates.
        """
        parts = []
        params = []
        index = 1
        for template, value in self._predicates:
            if value is _NO_PARAM:
                parts.append(template)
                continue
            parts.append(template.format(placeholder(index)))
            params.append(value)
            index += 1

        if not parts:
            return "", []
        return " WHERE " + " AND ".join(parts), params
