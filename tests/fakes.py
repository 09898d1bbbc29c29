"""
In-memory stand-in for an asyncpg connection.

`FakeBackend.connect` is handed to `Database(..., connect=...)`. Every
fetchrow/fetch/execute records (method, sql, args) and answers with the next
queued response; an exception instance in the queue is raised instead.
"""

from __future__ import annotations

from collections import deque
from typing import Any

_DEFAULTS = {"fetchrow": None, "fetch": [], "execute": "UPDATE 0"}


class FakeTransaction:
    def __init__(self, backend: "FakeBackend") -> None:
        self.backend = backend

    async def __aenter__(self) -> "FakeTransaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.backend.transactions.append("rollback" if exc_type else "commit")
        return False


class FakeConnection:
    def __init__(self, backend: "FakeBackend") -> None:
        self.backend = backend

    async def _answer(self, method: str, sql: str, args: tuple) -> Any:
        self.backend.calls.append((method, sql, args))
        if not self.backend.responses:
            return _DEFAULTS[method]
        response = self.backend.responses.popleft()
        if isinstance(response, BaseException):
            raise response
        return response

    async def fetchrow(self, sql: str, *args: Any) -> Any:
        return await self._answer("fetchrow", sql, args)

    async def fetch(self, sql: str, *args: Any) -> Any:
        return await self._answer("fetch", sql, args)

    async def execute(self, sql: str, *args: Any) -> Any:
        return await self._answer("execute", sql, args)

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self.backend)

    async def close(self) -> None:
        self.backend.closed += 1


class FakeBackend:
    def __init__(self) -> None:
        self.responses: deque = deque()
        self.calls: list[tuple[str, str, tuple]] = []
        self.transactions: list[str] = []
        self.connects: list[dict] = []
        self.closed = 0
        self.connect_error: BaseException | None = None

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def connect(self, **kwargs: Any) -> FakeConnection:
        self.connects.append(kwargs)
        if self.connect_error is not None:
            raise self.connect_error
        return FakeConnection(self)

    @property
    def statements(self) -> list[str]:
        return [" ".join(sql.split()) for _, sql, _ in self.calls]
