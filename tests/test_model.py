from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core import db, model
from core.errors import EmptyRecord, StorageOperationFailure
from tasks.repository import TASK_SCHEMA


async def test_insert_builds_parameterised_statement(backend):
    backend.queue({"task_id": 11, "project_id": 1})

    task_id = await model.insert(
        "tasks",
        {"description": "Write docs", "projectId": "1", "status": "Pending", "junk": "x"},
        TASK_SCHEMA,
    )

    assert task_id == 11
    method, sql, args = backend.calls[0]
    assert method == "fetchrow"
    assert backend.statements[0] == (
        "INSERT INTO tasks (project_id, description, status) VALUES ($1, $2, $3) RETURNING *"
    )
    assert args == (1, "Write docs", "Pending")
    assert backend.transactions == ["commit"]
    assert backend.closed == 1


async def test_insert_rejects_empty_record(backend):
    with pytest.raises(EmptyRecord):
        await model.insert("tasks", {"unknown": 1}, TASK_SCHEMA)
    with pytest.raises(EmptyRecord):
        await model.insert("tasks", None, TASK_SCHEMA)
    assert backend.connects == []


async def test_update_numbers_set_then_where_placeholders(backend):
    backend.queue("UPDATE 1")

    result = await model.update("tasks", {"status": "Completed"}, {"taskId": "5"}, TASK_SCHEMA)

    assert result.affected_rows == 1
    assert result.status == "UPDATE 1"
    assert backend.statements[0] == "UPDATE tasks SET status = $1 WHERE task_id = $2"
    assert backend.calls[0][2] == ("Completed", 5)


async def test_update_with_no_matching_rows_is_not_an_error(backend):
    backend.queue("UPDATE 0")
    result = await model.update("tasks", {"status": "Completed"}, {"taskId": 99}, TASK_SCHEMA)
    assert result.affected_rows == 0


@pytest.mark.parametrize(
    "record, where",
    [({}, {"taskId": 1}), ({"status": "Pending"}, {}), ({"junk": 1}, {"taskId": 1})],
)
async def test_update_rejects_empty_sides(backend, record, where):
    with pytest.raises(EmptyRecord):
        await model.update("tasks", record, where, TASK_SCHEMA)


async def test_remove_returns_where(backend):
    backend.queue("DELETE 1")
    where = {"taskId": 3}

    assert await model.remove("tasks", where, TASK_SCHEMA) == where
    assert backend.statements[0] == "DELETE FROM tasks WHERE task_id = $1"
    assert backend.calls[0][2] == (3,)


async def test_remove_rejects_empty_where(backend):
    with pytest.raises(EmptyRecord):
        await model.remove("tasks", {}, TASK_SCHEMA)


async def test_get_one_translates_and_coerces(backend):
    created = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    backend.queue({"task_id": "7", "worker_id": None, "status": "Pending", "created_at": created})

    task = await model.get_one("SELECT * FROM tasks WHERE task_id = $1", [7], TASK_SCHEMA)

    assert task == {
        "taskId": 7,
        "workerId": None,
        "status": "Pending",
        "createdAt": "2024-03-01T09:30:00.000Z",
    }
    assert backend.calls[0][2] == (7,)


async def test_get_one_without_row_returns_none(backend):
    assert await model.get_one("SELECT * FROM tasks WHERE task_id = $1", [1], TASK_SCHEMA) is None


async def test_find_many_returns_empty_list(backend):
    assert await model.find_many("SELECT * FROM tasks", [], TASK_SCHEMA) == []


async def test_scalar_value_and_exists(backend):
    backend.queue({"project_name": "Site"}, None)
    assert await model.scalar_value("SELECT project_name FROM projects WHERE project_id = $1", [1]) == "Site"
    assert await model.exists("SELECT 1 FROM projects WHERE project_id = $1", [2]) is False


async def test_run_statement(backend):
    backend.queue("DELETE 4")
    result = await model.run_statement("DELETE FROM tasks WHERE project_id = $1", [2])
    assert result.affected_rows == 4
    assert result.insert_id is None


async def test_run_statement_insert_returning_reports_id(backend):
    backend.queue([{"faq_id": 5}])
    result = await model.run_statement(
        "INSERT INTO faqs (question, answer) VALUES ($1, $2) RETURNING faq_id", ["q", "a"]
    )
    assert result == db.ExecutionResult(status="INSERT 0 1", affected_rows=1, insert_id=5)
    assert backend.calls[0][0] == "fetch"
    assert backend.transactions == ["commit"]


async def test_run_statement_insert_without_returning_has_no_id(backend):
    backend.queue("INSERT 0 1")
    result = await model.run_statement("INSERT INTO faqs (question, answer) VALUES ($1, $2)", ["q", "a"])
    assert result.affected_rows == 1
    assert result.insert_id is None


async def test_run_statement_update_returning_counts_rows(backend):
    backend.queue([{"task_id": 1}, {"task_id": 2}])
    result = await model.run_statement("UPDATE tasks SET status = $1 RETURNING task_id", ["Done"])
    assert result == db.ExecutionResult(status="UPDATE 2", affected_rows=2)


async def test_storage_failure_rolls_back_and_closes(backend):
    backend.queue(RuntimeError("duplicate key value"))

    with pytest.raises(StorageOperationFailure, match="duplicate key value"):
        await model.insert("tasks", {"projectId": 1, "description": "x"}, TASK_SCHEMA)

    assert backend.transactions == ["rollback"]
    assert backend.closed == 1


async def test_read_failure_closes_connection(backend):
    backend.queue(RuntimeError("syntax error"))
    with pytest.raises(StorageOperationFailure):
        await model.find_many("SELEC 1")
    assert backend.closed == 1


async def test_connect_failure_is_a_storage_failure(backend):
    backend.connect_error = OSError("connection refused")
    with pytest.raises(StorageOperationFailure, match="connection refused"):
        await model.get_one("SELECT 1")


async def test_connection_uses_settings(backend, settings):
    await model.get_one("SELECT 1")
    assert backend.connects == [
        {
            "dsn": settings.database_url,
            "timeout": settings.db_connect_timeout,
            "command_timeout": settings.db_command_timeout,
        }
    ]


@pytest.mark.parametrize("name", ["tasks; DROP TABLE users", "1tasks", ""])
async def test_invalid_identifiers_are_rejected(backend, name):
    with pytest.raises(ValueError):
        await model.insert(name, {"taskId": 1}, TASK_SCHEMA)


def test_database_must_be_initialised():
    db.close_database()
    with pytest.raises(RuntimeError):
        db.database()
