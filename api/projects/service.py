"""
Project business logic.

Progress is a weighted share of the project's tasks: a completed task counts
fully, one in progress counts half.
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timezone

from fastapi import HTTPException, status

from clients import repository as client_repository
from core import config
from core.errors import NotFound
from tasks import repository as task_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def progress_percent(*, total: int, completed: int, in_progress: int) -> int:
    if not total:
        return 0
    ratio = (completed * 100 + in_progress * 50) / (total * 100)
    return math.floor(ratio * 100 + 0.5)


async def _require_client(client_id: int) -> None:
    if not await client_repository.client_exists(client_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Client {client_id} does not exist.",
        )


async def project_stats() -> dict:
    return await repository.project_stats()


async def list_projects(filters: dict | None = None) -> list[dict]:
    return await repository.list_projects(filters)


async def get_project(project_id: int) -> dict:
    project = await repository.get_project_by_id(project_id)
    if project is None:
        raise NotFound("Project not found.")
    return project


async def create_project(payload: schemas.ProjectCreateRequest) -> dict:
    await _require_client(payload.clientId)

    now = _utc_now()
    project = {
        "clientId": payload.clientId,
        "projectName": payload.projectName,
        "description": payload.description,
        "status": payload.status or repository.DEFAULT_STATUS,
        "createdAt": now,
        "updatedAt": now,
    }
    project_id = await repository.create_project(project)
    logger.info("project_created project_id=%s client_id=%s", project_id, payload.clientId)
    return await get_project(project_id)


async def update_project(project_id: int, payload: schemas.ProjectUpdateRequest) -> dict:
    data = payload.model_dump(exclude_none=True)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")
    if "clientId" in data:
        await _require_client(data["clientId"])

    data["updatedAt"] = _utc_now()
    result = await repository.update_project(project_id, data)
    if result.affected_rows == 0:
        raise NotFound("Project not found.")
    return await get_project(project_id)


async def delete_project(project_id: int) -> dict:
    if not await repository.project_exists(project_id):
        raise NotFound("Project not found.")

    await repository.delete_project(project_id)
    logger.info("project_deleted project_id=%s", project_id)
    return {"success": True, "message": "Project deleted."}


async def list_projects_by_client(client_id: int) -> list[dict]:
    return await repository.list_projects_by_client(client_id)


async def list_client_rows() -> list[dict]:
    return await client_repository.list_client_rows()


async def _compute_progress(project_id: int) -> dict:
    project_name = await repository.get_project_name(project_id)
    if project_name is None:
        raise NotFound("Project not found.")

    counts = await repository.task_counts(project_id)
    total = counts.get("totalTasks") or 0
    if not total:
        return {
            "progress": 0,
            "projectName": project_name,
            "totalTasks": 0,
            "completedTasks": 0,
            "inProgressTasks": 0,
            "pendingTasks": 0,
            "taskStatus": [],
        }

    completed = counts.get("completedTasks") or 0
    in_progress = counts.get("inProgressTasks") or 0
    return {
        "progress": progress_percent(total=total, completed=completed, in_progress=in_progress),
        "projectName": project_name,
        "totalTasks": total,
        "completedTasks": completed,
        "inProgressTasks": in_progress,
        "pendingTasks": counts.get("pendingTasks") or 0,
        "taskStatus": await repository.list_progress_tasks(project_id),
    }


async def project_progress(project_id: int) -> dict:
    timeout = config.get_settings().progress_timeout_s
    try:
        return await asyncio.wait_for(_compute_progress(project_id), timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("project_progress_timeout project_id=%s timeout_s=%s", project_id, timeout)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Timed out computing project progress.",
        ) from exc


async def list_client_projects(user_id: int) -> list[dict]:
    projects = await repository.list_projects_by_client_user(user_id)
    for project in projects:
        progress = await _compute_progress(project["projectId"])
        project["progress"] = progress["progress"]
        project["taskStats"] = {
            "total": progress["totalTasks"],
            "completed": progress["completedTasks"],
            "inProgress": progress["inProgressTasks"],
            "pending": progress["pendingTasks"],
        }
    return projects


async def list_worker_projects(worker_id: int) -> list[dict]:
    return await repository.list_projects_by_worker(worker_id)


async def list_worker_project_tasks(project_id: int, worker_id: int) -> list[dict]:
    return await repository.list_worker_project_tasks(project_id, worker_id)


async def update_worker_task_status(task_id: int, worker_id: int, new_status: str) -> dict:
    if not await repository.worker_owns_task(task_id, worker_id):
        if await task_repository.task_exists(task_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Task is not assigned to the current worker.",
            )
        raise NotFound("Task not found.")

    result = await task_repository.update_task(
        task_id,
        {"status": new_status, "updatedAt": _utc_now()},
    )
    logger.info("task_status_updated task_id=%s worker_id=%s status=%s", task_id, worker_id, new_status)
    return {
        "success": True,
        "message": "Task status updated.",
        "affectedRows": result.affected_rows,
    }
