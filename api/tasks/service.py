"""
Task business logic.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, status

from core.coercion import parse_datetime
from core.errors import NotFound

from . import repository, schemas

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_status(value: str) -> str:
    if value not in repository.TASK_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status. Must be one of: {', '.join(repository.TASK_STATUSES)}.",
        )
    return value


async def create_task(payload: schemas.TaskCreateRequest) -> dict:
    task = {
        "projectId": payload.projectId,
        "workerId": payload.workerId,
        "description": payload.description,
        "status": payload.status or repository.DEFAULT_STATUS,
    }
    task_id = await repository.create_task(task)
    logger.info("task_created task_id=%s project_id=%s", task_id, payload.projectId)
    return {**task, "taskId": task_id}


async def get_task(task_id: int) -> dict:
    task = await repository.get_task_by_id(task_id)
    if task is None:
        raise NotFound("Task not found.")
    return task


async def update_task(task_id: int, payload: schemas.TaskUpdateRequest) -> dict:
    data: dict[str, Any] = {}
    if "workerId" in payload.model_fields_set:
        data["workerId"] = payload.workerId
    if payload.description:
        data["description"] = payload.description
    if payload.status:
        data["status"] = payload.status
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields to update.")

    await get_task(task_id)
    data["updatedAt"] = _utc_now()
    await repository.update_task(task_id, data)
    return await get_task(task_id)


async def delete_task(task_id: int) -> dict:
    if not await repository.task_exists(task_id):
        return {"success": True, "message": "No action needed, task does not exist."}

    await repository.delete_task(task_id)
    logger.info("task_deleted task_id=%s", task_id)
    return {"success": True, "message": "Task deleted."}


async def list_tasks(filters: dict[str, Any] | None = None) -> list[dict]:
    return await repository.list_tasks(filters)


async def list_tasks_by_status(value: str) -> list[dict]:
    return await repository.list_tasks({"status": validate_status(value)})


async def list_tasks_detailed(filters: dict[str, Any] | None = None) -> list[dict]:
    return await repository.list_tasks_detailed(filters)


async def get_task_detailed(task_id: int) -> dict:
    task = await repository.get_task_detailed(task_id)
    if task is None:
        raise NotFound("Task not found.")
    return task


async def list_tasks_by_date_range(start_date: str, end_date: str) -> list[dict]:
    start = parse_datetime(start_date)
    end = parse_datetime(end_date)
    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="startDate and endDate must be ISO-8601 dates.",
        )
    return await repository.list_tasks_by_date_range(start, end)


async def task_stats() -> dict:
    return await repository.task_stats()


async def worker_performance(worker_id: int) -> dict:
    row = await repository.worker_performance(worker_id)
    if row is None:
        return {
            "workerId": worker_id,
            "totalTasks": 0,
            "completedTasks": 0,
            "inProgressTasks": 0,
            "pendingTasks": 0,
            "completionRate": 0.0,
        }

    total = row.get("totalTasks") or 0
    completed = row.get("completedTasks") or 0
    row["completionRate"] = round(completed * 100 / total, 2) if total else 0.0
    return row


async def bulk_assign(payload: schemas.BulkAssignRequest) -> dict:
    for task_id in payload.taskIds:
        await update_task(task_id, schemas.TaskUpdateRequest(workerId=payload.workerId))
    return {
        "success": True,
        "message": f"{len(payload.taskIds)} tasks assigned to worker {payload.workerId}.",
    }


async def bulk_update_status(payload: schemas.BulkStatusRequest) -> dict:
    for task_id in payload.taskIds:
        await update_task(task_id, schemas.TaskUpdateRequest(status=payload.status))
    return {
        "success": True,
        "message": f'{len(payload.taskIds)} tasks updated to status "{payload.status}".',
    }
