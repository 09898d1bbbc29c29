"""
Task API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


def _task_filters(
    projectId: int | None = Query(default=None),
    workerId: int | None = Query(default=None),
    status: str | None = Query(default=None),
) -> dict:
    return {"projectId": projectId, "workerId": workerId, "status": status}


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: schemas.TaskCreateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    task = await service.create_task(payload)
    return {"success": True, "task": task}


@router.get("/tasks")
async def list_tasks(
    filters: dict = Depends(_task_filters),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    tasks = await service.list_tasks(filters)
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/all")
async def list_all_tasks(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    tasks = await service.list_tasks()
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/status/{task_status}")
async def list_tasks_by_status(
    task_status: str,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    tasks = await service.list_tasks_by_status(task_status)
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/detailed")
async def list_tasks_detailed(
    filters: dict = Depends(_task_filters),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    tasks = await service.list_tasks_detailed(filters)
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/detailed/{task_id}")
async def get_task_detailed(
    task_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "task": await service.get_task_detailed(task_id)}


@router.get("/tasks/all/detailed")
async def list_all_tasks_detailed(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    tasks = await service.list_tasks_detailed()
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/admin/stats")
async def task_stats(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    return {"success": True, "stats": await service.task_stats()}


@router.get("/tasks/admin/date-range")
async def list_tasks_by_date_range(
    startDate: str | None = Query(default=None),
    endDate: str | None = Query(default=None),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    tasks = await service.list_tasks_by_date_range(startDate or "", endDate or "")
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/admin/worker-performance/{worker_id}")
async def worker_performance(
    worker_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "performance": await service.worker_performance(worker_id)}


@router.post("/tasks/admin/bulk-assign")
async def bulk_assign(
    payload: schemas.BulkAssignRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.bulk_assign(payload)


@router.post("/tasks/admin/bulk-update-status")
async def bulk_update_status(
    payload: schemas.BulkStatusRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.bulk_update_status(payload)


@router.get("/tasks/project/{project_id}")
async def list_project_tasks(
    project_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    tasks = await service.list_tasks({"projectId": project_id})
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/worker/{worker_id}")
async def list_worker_tasks(
    worker_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    tasks = await service.list_tasks({"workerId": worker_id})
    return {"success": True, "tasks": tasks, "count": len(tasks)}


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "task": await service.get_task(task_id)}


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: int,
    payload: schemas.TaskUpdateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    task = await service.update_task(task_id, payload)
    return {"success": True, "task": task}


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_task(task_id)
