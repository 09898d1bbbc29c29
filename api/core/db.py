"""
Async database access (raw SQL) using asyncpg.

`Database` is the storage client. It is built from `Settings` at startup
(see `api/main.py`) and opens one short-lived connection per call; there is
no pool. Every call closes its connection before returning, on the error
path too.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable

import asyncpg

from .config import Settings
from .errors import StorageOperationFailure

logger = logging.getLogger(__name__)

Connect = Callable[..., Awaitable[Any]]

_database: "Database | None" = None
_RETURNING_RE = re.compile(r"\bRETURNING\b", re.IGNORECASE)


@dataclass(frozen=True)
class ExecutionResult:
    """
    Low-level outcome of a write: the driver's command status (e.g.
    "UPDATE 1"), the affected-row count and, for inserts, the generated id.
    """

    status: str
    affected_rows: int
    insert_id: int | None = None


def _affected_rows(status: str | None) -> int:
    # "INSERT 0 1", "UPDATE 3", "DELETE 0"
    if not status:
        return 0
    tail = status.rsplit(" ", 1)[-1]
    return int(tail) if tail.isdigit() else 0


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def _returning_result(sql: str, rows: list[dict[str, Any]]) -> ExecutionResult:
    # asyncpg gives no command status for fetched statements; rebuild it.
    verb = sql.split(None, 1)[0].upper() if sql.strip() else ""
    count = len(rows)
    if verb == "INSERT":
        insert_id = next(iter(rows[0].values()), None) if rows else None
        return ExecutionResult(status=f"INSERT 0 {count}", affected_rows=count, insert_id=insert_id)
    return ExecutionResult(status=f"{verb} {count}".strip(), affected_rows=count)


class Database:
    def __init__(self, settings: Settings, *, connect: Connect | None = None) -> None:
        self.settings = settings
        self._connect = connect or asyncpg.connect

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[Any]:
        try:
            conn = await self._connect(
                dsn=self.settings.database_url,
                timeout=self.settings.db_connect_timeout,
                command_timeout=self.settings.db_command_timeout,
            )
        except Exception as exc:
            logger.exception("db_connect_failed")
            raise StorageOperationFailure(str(exc)) from exc

        try:
            yield conn
        finally:
            await conn.close()

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        async with self.connection() as conn:
            try:
                row = await conn.fetchrow(sql, *args)
            except Exception as exc:
                logger.exception("db_fetch_one_failed")
                raise StorageOperationFailure(str(exc)) from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        async with self.connection() as conn:
            try:
                rows = await conn.fetch(sql, *args)
            except Exception as exc:
                logger.exception("db_fetch_all_failed")
                raise StorageOperationFailure(str(exc)) from exc
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> ExecutionResult:
        """
        Run a statement (INSERT/UPDATE/DELETE) inside a transaction.

        A statement with a RETURNING clause is fetched instead; an INSERT then
        reports the first column of its first returned row as `insert_id`.

        On failure the transaction is rolled back, the error is logged and
        re-raised as StorageOperationFailure.
        """
        returning = _RETURNING_RE.search(sql) is not None
        async with self.connection() as conn:
            try:
                async with conn.transaction():
                    if returning:
                        rows = await conn.fetch(sql, *args)
                    else:
                        status = await conn.execute(sql, *args)
            except Exception as exc:
                logger.exception("db_execute_failed sql=%s", sql)
                raise StorageOperationFailure(str(exc)) from exc

        if not returning:
            return ExecutionResult(status=status or "", affected_rows=_affected_rows(status))
        return _returning_result(sql, [_record_to_dict(r) for r in rows])

    async def execute_returning(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a write with a RETURNING clause inside a transaction and return
        the first returned row.
        """
        async with self.connection() as conn:
            try:
                async with conn.transaction():
                    row = await conn.fetchrow(sql, *args)
            except Exception as exc:
                logger.exception("db_execute_returning_failed sql=%s", sql)
                raise StorageOperationFailure(str(exc)) from exc
        return _record_to_dict(row) if row is not None else None


def init_database(settings: Settings, *, connect: Connect | None = None) -> Database:
    global _database
    _database = Database(settings, connect=connect)
    return _database


def close_database() -> None:
    global _database
    _database = None


def database() -> Database:
    if _database is None:
        raise RuntimeError("Database is not initialized. Call init_database() on startup.")
    return _database


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    return await database().fetch_one(sql, *args)


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    return await database().fetch_all(sql, *args)


async def execute(sql: str, *args: Any) -> ExecutionResult:
    return await database().execute(sql, *args)


async def execute_returning(sql: str, *args: Any) -> dict[str, Any] | None:
    return await database().execute_returning(sql, *args)
