"""
Task persistence.
"""

from __future__ import annotations

from typing import Any

from core import fields, model
from core.db import ExecutionResult

TASK_STATUSES = ("Pending", "In Progress", "Completed")
DEFAULT_STATUS = "Pending"

TASK_SCHEMA = {
    "taskId": fields.number,
    "projectId": fields.number,
    "workerId": fields.number,
    "description": fields.string,
    "status": fields.enum(TASK_STATUSES),
    "createdAt": fields.date,
    "updatedAt": fields.date,
}

# Task joined with its project and assigned worker.
TASK_DETAIL_SCHEMA = {
    **TASK_SCHEMA,
    "projectName": fields.string,
    "projectDescription": fields.string,
    "projectStatus": fields.enum(TASK_STATUSES),
    "workerName": fields.string,
    "workerEmail": fields.string,
    "assigned": fields.computed(lambda task, _: task.get("workerId") is not None),
}

TASK_STATS_SCHEMA = {
    "total": fields.number,
    "completed": fields.number,
    "pending": fields.number,
    "inProgress": fields.number,
    "totalProjects": fields.number,
    "totalWorkers": fields.number,
}

WORKER_PERFORMANCE_SCHEMA = {
    "workerId": fields.number,
    "totalTasks": fields.number,
    "completedTasks": fields.number,
    "inProgressTasks": fields.number,
    "pendingTasks": fields.number,
}

_DETAIL_SELECT = """
    SELECT
      t.*,
      p.project_name,
      p.description AS project_description,
      p.status AS project_status,
      u.name AS worker_name,
      u.email AS worker_email
    FROM tasks t
    INNER JOIN projects p ON t.project_id = p.project_id
    LEFT JOIN users u ON t.worker_id = u.user_id
"""


def _filters(alias: str, filters: dict[str, Any]) -> tuple[str, list[Any]]:
    conditions: list[str] = []
    params: list[Any] = []
    for key, column in (("projectId", "project_id"), ("workerId", "worker_id"), ("status", "status")):
        value = filters.get(key)
        if value is None or value == "":
            continue
        params.append(value)
        conditions.append(f"{alias}{column} = ${len(params)}")
    where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
    return where, params


async def create_task(task: dict) -> int:
    return await model.insert("tasks", task, TASK_SCHEMA)


async def get_task_by_id(task_id: int) -> dict | None:
    return await model.get_one("SELECT * FROM tasks WHERE task_id = $1", [task_id], TASK_SCHEMA)


async def task_exists(task_id: int) -> bool:
    return await model.exists("SELECT task_id FROM tasks WHERE task_id = $1", [task_id])


async def update_task(task_id: int, data: dict) -> ExecutionResult:
    return await model.update("tasks", data, {"taskId": task_id}, TASK_SCHEMA)


async def delete_task(task_id: int) -> dict:
    return await model.remove("tasks", {"taskId": task_id}, TASK_SCHEMA)


async def list_tasks(filters: dict[str, Any] | None = None) -> list[dict]:
    where, params = _filters("", filters or {})
    return await model.find_many(
        f"SELECT * FROM tasks{where} ORDER BY created_at DESC",
        params,
        TASK_SCHEMA,
    )


async def list_tasks_detailed(filters: dict[str, Any] | None = None) -> list[dict]:
    where, params = _filters("t.", filters or {})
    return await model.find_many(
        f"{_DETAIL_SELECT}{where} ORDER BY t.created_at DESC",
        params,
        TASK_DETAIL_SCHEMA,
    )


async def get_task_detailed(task_id: int) -> dict | None:
    return await model.get_one(
        f"{_DETAIL_SELECT} WHERE t.task_id = $1",
        [task_id],
        TASK_DETAIL_SCHEMA,
    )


async def list_tasks_by_date_range(start, end) -> list[dict]:
    return await model.find_many(
        f"{_DETAIL_SELECT} WHERE t.created_at BETWEEN $1 AND $2 ORDER BY t.created_at DESC",
        [start, end],
        TASK_DETAIL_SCHEMA,
    )


async def task_stats() -> dict:
    row = await model.get_one(
        """
        SELECT
          count(*) AS total,
          count(*) FILTER (WHERE status = 'Completed') AS completed,
          count(*) FILTER (WHERE status = 'Pending') AS pending,
          count(*) FILTER (WHERE status = 'In Progress') AS in_progress,
          count(DISTINCT project_id) AS total_projects,
          count(DISTINCT worker_id) AS total_workers
        FROM tasks
        """,
        [],
        TASK_STATS_SCHEMA,
    )
    return row or {key: 0 for key in TASK_STATS_SCHEMA}


async def worker_performance(worker_id: int) -> dict | None:
    return await model.get_one(
        """
        SELECT
          worker_id,
          count(*) AS total_tasks,
          count(*) FILTER (WHERE status = 'Completed') AS completed_tasks,
          count(*) FILTER (WHERE status = 'In Progress') AS in_progress_tasks,
          count(*) FILTER (WHERE status = 'Pending') AS pending_tasks
        FROM tasks
        WHERE worker_id = $1
        GROUP BY worker_id
        """,
        [worker_id],
        WORKER_PERFORMANCE_SCHEMA,
    )
