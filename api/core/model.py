"""
Query helpers shared by every feature repository.

Reads run a hand-written query and map each row back to an application
record (key translation, then schema coercion). Writes take a table name and
an application record, build a parameterised statement from the storage form
of the record and run it in a transaction.

    task_id = await model.insert("tasks", {"projectId": 1, "description": "x"}, TASK_SCHEMA)
    task = await model.get_one("SELECT * FROM tasks WHERE task_id = $1", [task_id], TASK_SCHEMA)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Sequence

from . import db
from .coercion import to_application, to_storage
from .db import ExecutionResult
from .errors import EmptyRecord
from .fields import Record, Schema
from .naming import to_application_keys, to_storage_keys

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _identifier(name: str) -> str:
    if not _IDENTIFIER_RE.match(name or ""):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name.lower()


def _row_to_record(row: dict[str, Any] | None, schema: Schema | None) -> Record | None:
    record = to_application_keys(row)
    if record is not None and schema is not None:
        record = to_application(record, schema)
    return record


def _storage_record(record: Record | None, schema: Schema | None) -> dict[str, Any]:
    if record is None:
        return {}
    if schema is not None:
        record = to_storage(record, schema)
    return to_storage_keys(record) or {}


async def get_one(query: str, params: Sequence[Any] = (), schema: Schema | None = None) -> Record | None:
    """
    First row of `query` as an application record, or None.
    """
    row = await db.fetch_one(query, *params)
    return _row_to_record(row, schema)


async def find_many(query: str, params: Sequence[Any] = (), schema: Schema | None = None) -> list[Record]:
    """
    Every row of `query` as application records (empty list if none).
    """
    rows = await db.fetch_all(query, *params)
    return [_row_to_record(row, schema) for row in rows]


async def scalar_value(query: str, params: Sequence[Any] = ()) -> Any:
    record = await get_one(query, params)
    if not record:
        return None
    return next(iter(record.values()))


async def exists(query: str, params: Sequence[Any] = ()) -> bool:
    return await get_one(query, params) is not None


async def run_statement(query: str, params: Sequence[Any] = ()) -> ExecutionResult:
    """
    Run a raw write statement in its own transaction.
    """
    return await db.execute(query, *params)


def _placeholders(start: int, count: int) -> Iterable[str]:
    return (f"${i}" for i in range(start, start + count))


async def insert(table: str, record: Record | None, schema: Schema | None = None) -> int | None:
    """
    Insert one record and return the generated identifier.

    The identifier is the first column of the inserted row (tables keep their
    serial primary key first).
    """
    values = _storage_record(record, schema)
    if not values:
        raise EmptyRecord("Cannot insert an empty record.")

    columns = [_identifier(name) for name in values]
    sql = (
        f"INSERT INTO {_identifier(table)} ({', '.join(columns)}) "
        f"VALUES ({', '.join(_placeholders(1, len(columns)))}) RETURNING *"
    )
    row = await db.execute_returning(sql, *values.values())
    if not row:
        return None

    insert_id = next(iter(row.values()))
    logger.info("insert table=%s id=%s", table, insert_id)
    return insert_id


async def update(
    table: str,
    record: Record | None,
    where: Record | None,
    schema: Schema | None = None,
) -> ExecutionResult:
    """
    UPDATE `table` SET <record> WHERE <where> (equality, AND-joined).

    Zero affected rows is reported through the result, not raised.
    """
    values = _storage_record(record, schema)
    conditions = _storage_record(where, schema)
    if not values:
        raise EmptyRecord("Cannot update with an empty record.")
    if not conditions:
        raise EmptyRecord("Cannot update without conditions.")

    set_clause = ", ".join(
        f"{_identifier(name)} = {placeholder}"
        for name, placeholder in zip(values, _placeholders(1, len(values)))
    )
    where_clause = " AND ".join(
        f"{_identifier(name)} = {placeholder}"
        for name, placeholder in zip(conditions, _placeholders(len(values) + 1, len(conditions)))
    )
    sql = f"UPDATE {_identifier(table)} SET {set_clause} WHERE {where_clause}"
    return await db.execute(sql, *values.values(), *conditions.values())


async def remove(table: str, where: Record | None, schema: Schema | None = None) -> Record | None:
    """
    DELETE rows matching `where`; returns `where` unchanged.
    """
    conditions = _storage_record(where, schema)
    if not conditions:
        raise EmptyRecord("Cannot delete without conditions.")

    where_clause = " AND ".join(
        f"{_identifier(name)} = {placeholder}"
        for name, placeholder in zip(conditions, _placeholders(1, len(conditions)))
    )
    result = await db.execute(f"DELETE FROM {_identifier(table)} WHERE {where_clause}", *conditions.values())
    logger.info("remove table=%s where=%s affected=%s", table, where, result.affected_rows)
    return where
