"""
Partial UPDATE statements built from a column -> value mapping.

Column and table names are interpolated into the SQL text, so callers must
only pass names from their own whitelist. Values are always bound.
"""
import re
from typing import Any, Mapping, NamedTuple

from sqlalchemy import bindparam, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.orm import Session

_PLACEHOLDER = re.compile(r"\$(\d+)")


class PartialUpdate(NamedTuple):
    query: str
    values: list[Any]


def sql_for_partial_update(
    table: str,
    items: Mapping[str, Any],
    key: str,
    key_value: Any,
) -> PartialUpdate:
    """
    Generate a selective UPDATE statement with positional placeholders.

    >>> sql_for_partial_update("users", {"name": "Elie"}, "username", "bob")
    PartialUpdate(query='UPDATE users SET name=$1 WHERE username=$2 RETURNING *', values=['Elie', 'bob'])

    Args:
        table: Table to update
        items: Columns to set, in the order they should appear
        key: Column identifying the row(s)
        key_value: Value of the key column

    Returns:
        The statement and its values, key value last

    Raises:
        ValueError: if ``items`` is empty; callers always know their field set
    """
    if not items:
        raise ValueError(f"Partial update of '{table}' needs at least one column")

    columns = []
    values = []
    for idx, (column, value) in enumerate(items.items(), start=1):
        columns.append(f"{column}=${idx}")
        values.append(value)

    values.append(key_value)
    query = (
        f"UPDATE {table} SET {', '.join(columns)} "
        f"WHERE {key}=${len(values)} RETURNING *"
    )
    return PartialUpdate(query, values)


def execute_statement(
    session: Session,
    query: str,
    values: list[Any],
) -> list[RowMapping]:
    """
    Run a statement with $n placeholders in the session's transaction.

    Placeholders are rewritten to named bind parameters; each value is bound
    with the SQL type inferred from its Python type. Does not commit.

    Returns:
        Rows produced by the statement's RETURNING clause
    """
    params = [
        bindparam(f"p{idx}", value)
        for idx, value in enumerate(values, start=1)
    ]
    statement = text(_PLACEHOLDER.sub(r":p\1", query)).bindparams(*params)
    result = session.execute(statement)
    if not result.returns_rows:
        return []
    return list(result.mappings().all())


def apply_partial_update(
    session: Session,
    table: str,
    items: Mapping[str, Any],
    key: str,
    key_value: Any,
) -> list[RowMapping]:
    """Build and run a partial update; see sql_for_partial_update."""
    query, values = sql_for_partial_update(table, items, key, key_value)
    return execute_statement(session, query, values)
