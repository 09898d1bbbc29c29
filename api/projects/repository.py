"""
Project persistence.

List queries return each project with its client summary nested under
`client`, built in SQL with `json_build_object` and decoded by the schema.
"""

from __future__ import annotations

from typing import Any

from core import fields, model
from core.db import ExecutionResult
from tasks.repository import TASK_SCHEMA, TASK_STATUSES

PROJECT_STATUSES = TASK_STATUSES
DEFAULT_STATUS = "Pending"

PROJECT_SCHEMA = {
    "projectId": fields.number,
    "clientId": fields.number,
    "projectName": fields.string,
    "description": fields.string,
    "status": fields.enum(PROJECT_STATUSES),
    "createdAt": fields.date,
    "updatedAt": fields.date,
}

PROJECT_CLIENT_SCHEMA = {
    "clientId": fields.number,
    "name": fields.string,
    "email": fields.string,
    "contactInfo": fields.string,
}

PROJECT_LIST_SCHEMA = {
    **PROJECT_SCHEMA,
    "client": fields.entity(PROJECT_CLIENT_SCHEMA),
}

PROJECT_STATS_SCHEMA = {
    "total": fields.number,
    "completed": fields.number,
    "pending": fields.number,
    "inProgress": fields.number,
}

PROGRESS_COUNTS_SCHEMA = {
    "totalTasks": fields.number,
    "completedTasks": fields.number,
    "inProgressTasks": fields.number,
    "pendingTasks": fields.number,
}

PROGRESS_TASK_SCHEMA = {
    "taskId": fields.number,
    "description": fields.string,
    "status": fields.enum(TASK_STATUSES),
    "createdAt": fields.date,
    "workerName": fields.string,
}

WORKER_TASK_SCHEMA = {
    **TASK_SCHEMA,
    "projectName": fields.string,
    "projectStatus": fields.enum(PROJECT_STATUSES),
    "workerName": fields.string,
}

_LIST_SELECT = """
    SELECT
      p.*,
      CASE WHEN c.client_id IS NULL THEN NULL ELSE json_build_object(
        'clientId', c.client_id,
        'name', u.name,
        'email', u.email,
        'contactInfo', c.contact_info
      )::text END AS client
    FROM projects p
    LEFT JOIN clients c ON p.client_id = c.client_id
    LEFT JOIN users u ON c.user_id = u.user_id
"""


async def list_projects(filters: dict[str, Any] | None = None) -> list[dict]:
    filters = filters or {}
    conditions: list[str] = []
    params: list[Any] = []

    if filters.get("status"):
        params.append(filters["status"])
        conditions.append(f"p.status = ${len(params)}")
    if filters.get("clientId"):
        params.append(filters["clientId"])
        conditions.append(f"p.client_id = ${len(params)}")
    if filters.get("search"):
        params.append(f"%{filters['search']}%")
        n = len(params)
        conditions.append(f"(p.project_name ILIKE ${n} OR p.description ILIKE ${n} OR u.name ILIKE ${n})")

    where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
    return await model.find_many(
        f"{_LIST_SELECT}{where} ORDER BY p.created_at DESC",
        params,
        PROJECT_LIST_SCHEMA,
    )


async def get_project_by_id(project_id: int) -> dict | None:
    return await model.get_one(
        "SELECT * FROM projects WHERE project_id = $1",
        [project_id],
        PROJECT_SCHEMA,
    )


async def project_exists(project_id: int) -> bool:
    return await model.exists("SELECT project_id FROM projects WHERE project_id = $1", [project_id])


async def create_project(project: dict) -> int:
    return await model.insert("projects", project, PROJECT_SCHEMA)


async def update_project(project_id: int, data: dict) -> ExecutionResult:
    return await model.update("projects", data, {"projectId": project_id}, PROJECT_SCHEMA)


async def delete_project(project_id: int) -> dict:
    return await model.remove("projects", {"projectId": project_id}, PROJECT_SCHEMA)


async def list_projects_by_client(client_id: int) -> list[dict]:
    return await model.find_many(
        f"{_LIST_SELECT} WHERE p.client_id = $1 ORDER BY p.created_at DESC",
        [client_id],
        PROJECT_LIST_SCHEMA,
    )


async def list_projects_by_client_user(user_id: int) -> list[dict]:
    return await model.find_many(
        f"{_LIST_SELECT} WHERE u.user_id = $1 ORDER BY p.created_at DESC",
        [user_id],
        PROJECT_LIST_SCHEMA,
    )


async def list_projects_by_worker(worker_id: int) -> list[dict]:
    return await model.find_many(
        f"""
        {_LIST_SELECT}
        WHERE EXISTS (
          SELECT 1 FROM tasks t WHERE t.project_id = p.project_id AND t.worker_id = $1
        )
        ORDER BY p.created_at DESC
        """,
        [worker_id],
        PROJECT_LIST_SCHEMA,
    )


async def project_stats() -> dict:
    row = await model.get_one(
        """
        SELECT
          count(*) AS total,
          count(*) FILTER (WHERE status = 'Completed') AS completed,
          count(*) FILTER (WHERE status = 'Pending') AS pending,
          count(*) FILTER (WHERE status = 'In Progress') AS in_progress
        FROM projects
        """,
        [],
        PROJECT_STATS_SCHEMA,
    )
    return row or {key: 0 for key in PROJECT_STATS_SCHEMA}


async def get_project_name(project_id: int) -> str | None:
    return await model.scalar_value(
        "SELECT project_name FROM projects WHERE project_id = $1",
        [project_id],
    )


async def task_counts(project_id: int) -> dict:
    row = await model.get_one(
        """
        SELECT
          count(*) AS total_tasks,
          count(*) FILTER (WHERE status = 'Completed') AS completed_tasks,
          count(*) FILTER (WHERE status = 'In Progress') AS in_progress_tasks,
          count(*) FILTER (WHERE status = 'Pending') AS pending_tasks
        FROM tasks
        WHERE project_id = $1
        """,
        [project_id],
        PROGRESS_COUNTS_SCHEMA,
    )
    return row or {key: 0 for key in PROGRESS_COUNTS_SCHEMA}


async def list_progress_tasks(project_id: int) -> list[dict]:
    return await model.find_many(
        """
        SELECT t.task_id, t.description, t.status, t.created_at, u.name AS worker_name
        FROM tasks t
        LEFT JOIN users u ON t.worker_id = u.user_id
        WHERE t.project_id = $1
        ORDER BY
          CASE t.status
            WHEN 'Completed' THEN 1
            WHEN 'In Progress' THEN 2
            WHEN 'Pending' THEN 3
          END,
          t.created_at DESC
        """,
        [project_id],
        PROGRESS_TASK_SCHEMA,
    )


async def list_worker_project_tasks(project_id: int, worker_id: int) -> list[dict]:
    return await model.find_many(
        """
        SELECT
          t.*,
          p.project_name,
          p.status AS project_status,
          u.name AS worker_name
        FROM tasks t
        JOIN projects p ON t.project_id = p.project_id
        LEFT JOIN users u ON t.worker_id = u.user_id
        WHERE t.project_id = $1 AND t.worker_id = $2
        ORDER BY t.created_at DESC
        """,
        [project_id, worker_id],
        WORKER_TASK_SCHEMA,
    )


async def worker_owns_task(task_id: int, worker_id: int) -> bool:
    return await model.exists(
        "SELECT task_id FROM tasks WHERE task_id = $1 AND worker_id = $2",
        [task_id, worker_id],
    )
