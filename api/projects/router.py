"""
Project API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from tasks.schemas import TaskStatusRequest

from . import schemas, service

router = APIRouter()


@router.get("/projects/my-projects")
async def list_my_projects(current_user: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    projects = await service.list_client_projects(int(current_user["id"]))
    return {"success": True, "projects": projects, "count": len(projects)}


@router.get("/projects/worker/projects")
async def list_worker_projects(current_user: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    projects = await service.list_worker_projects(int(current_user["id"]))
    return {"success": True, "projects": projects, "count": len(projects)}


@router.get("/projects/stats")
async def project_stats(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    return {"success": True, "stats": await service.project_stats()}


@router.get("/projects/clients")
async def list_clients(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    clients = await service.list_client_rows()
    return {"success": True, "clients": clients, "count": len(clients)}


@router.get("/projects/client/{client_id}")
async def list_client_projects(
    client_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    projects = await service.list_projects_by_client(client_id)
    return {"success": True, "projects": projects, "count": len(projects)}


@router.put("/projects/tasks/{task_id}/status")
async def update_task_status(
    task_id: int,
    payload: TaskStatusRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.update_worker_task_status(task_id, int(current_user["id"]), payload.status)


@router.get("/projects")
async def list_projects(
    project_status: str | None = Query(default=None, alias="status"),
    client_id: int | None = Query(default=None, alias="clientId"),
    search: str | None = Query(default=None),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    filters = {"status": project_status, "clientId": client_id, "search": search}
    projects = await service.list_projects(filters)
    return {"success": True, "projects": projects, "count": len(projects)}


@router.post("/projects", status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: schemas.ProjectCreateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    project = await service.create_project(payload)
    return {"success": True, "project": project}


@router.get("/projects/{project_id}")
async def get_project(
    project_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "project": await service.get_project(project_id)}


@router.put("/projects/{project_id}")
async def update_project(
    project_id: int,
    payload: schemas.ProjectUpdateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    project = await service.update_project(project_id, payload)
    return {"success": True, "project": project}


@router.patch("/projects/{project_id}/status")
async def update_project_status(
    project_id: int,
    payload: schemas.ProjectStatusRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    update = schemas.ProjectUpdateRequest(status=payload.status)
    project = await service.update_project(project_id, update)
    return {"success": True, "project": project}


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_project(project_id)


@router.get("/projects/{project_id}/progress")
async def project_progress(
    project_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "data": await service.project_progress(project_id)}


@router.get("/projects/{project_id}/worker/tasks")
async def list_worker_project_tasks(
    project_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    tasks = await service.list_worker_project_tasks(project_id, int(current_user["id"]))
    return {"success": True, "tasks": tasks, "count": len(tasks)}
