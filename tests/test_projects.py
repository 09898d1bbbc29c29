from __future__ import annotations

import asyncio

import pytest
from fastapi import HTTPException

from core import config
from core.config import Settings
from core.errors import NotFound
from projects import schemas, service


@pytest.mark.parametrize(
    "total, completed, in_progress, expected",
    [
        (0, 0, 0, 0),
        (4, 4, 0, 100),
        (4, 1, 1, 38),
        (3, 1, 0, 33),
        (2, 0, 1, 25),
        (8, 0, 1, 6),
    ],
)
def test_progress_percent(total, completed, in_progress, expected):
    assert service.progress_percent(total=total, completed=completed, in_progress=in_progress) == expected


async def test_project_progress(backend):
    backend.queue(
        {"project_name": "Website"},
        {"total_tasks": 2, "completed_tasks": 1, "in_progress_tasks": 1, "pending_tasks": 0},
        [
            {"task_id": 1, "description": "Design", "status": "Completed", "worker_name": "Ana"},
            {"task_id": 2, "description": "Build", "status": "In Progress", "worker_name": None},
        ],
    )

    progress = await service.project_progress(1)

    assert progress["progress"] == 75
    assert progress["projectName"] == "Website"
    assert progress["totalTasks"] == 2
    assert [t["taskId"] for t in progress["taskStatus"]] == [1, 2]


async def test_project_progress_without_tasks(backend):
    backend.queue({"project_name": "Empty"})
    progress = await service.project_progress(1)
    assert progress["progress"] == 0
    assert progress["taskStatus"] == []


async def test_project_progress_for_missing_project(backend):
    with pytest.raises(NotFound):
        await service.project_progress(1)


async def test_project_progress_times_out(monkeypatch):
    async def slow(_project_id):
        await asyncio.sleep(1)

    monkeypatch.setattr(config, "get_settings", lambda: Settings(database_url="x", progress_timeout_s=0.01))
    monkeypatch.setattr(service, "_compute_progress", slow)

    with pytest.raises(HTTPException) as exc:
        await service.project_progress(1)
    assert exc.value.status_code == 504


async def test_list_projects_nests_client(backend):
    backend.queue(
        [
            {
                "project_id": 1,
                "client_id": 3,
                "project_name": "Website",
                "status": "Pending",
                "client": '{"clientId": 3, "name": "Acme", "email": "ops@acme.test", "contactInfo": "555"}',
            },
            {"project_id": 2, "client_id": None, "project_name": "Internal", "status": "Completed", "client": None},
        ]
    )

    projects = await service.list_projects({"search": "web"})

    assert projects[0]["client"] == {
        "clientId": 3,
        "name": "Acme",
        "email": "ops@acme.test",
        "contactInfo": "555",
    }
    assert projects[1]["client"] is None
    assert "ILIKE $1" in backend.statements[0]
    assert backend.calls[0][2] == ("%web%",)


async def test_list_projects_filters_are_numbered(backend):
    await service.list_projects({"status": "Pending", "clientId": 3, "search": "x"})
    sql = backend.statements[0]
    assert "p.status = $1" in sql
    assert "p.client_id = $2" in sql
    assert "p.project_name ILIKE $3" in sql
    assert backend.calls[0][2] == ("Pending", 3, "%x%")


async def test_create_project_requires_existing_client(backend):
    with pytest.raises(HTTPException) as exc:
        await service.create_project(schemas.ProjectCreateRequest(clientId=3, projectName="Site"))
    assert exc.value.status_code == 400


async def test_create_project_defaults_status(backend):
    backend.queue(
        {"client_id": 3},
        {"project_id": 8},
        {"project_id": 8, "client_id": 3, "project_name": "Site", "status": "Pending"},
    )

    project = await service.create_project(schemas.ProjectCreateRequest(clientId=3, projectName="Site"))

    assert project["projectId"] == 8
    assert project["status"] == "Pending"
    insert_args = backend.calls[1][2]
    assert insert_args[:4] == (3, "Site", None, "Pending")


async def test_update_missing_project(backend):
    backend.queue("UPDATE 0")
    with pytest.raises(NotFound):
        await service.update_project(9, schemas.ProjectUpdateRequest(status="Completed"))


async def test_worker_cannot_update_someone_elses_task(backend):
    backend.queue(None, {"task_id": 5})
    with pytest.raises(HTTPException) as exc:
        await service.update_worker_task_status(5, 4, "Completed")
    assert exc.value.status_code == 403


async def test_worker_updates_own_task(backend):
    backend.queue({"task_id": 5}, "UPDATE 1")
    result = await service.update_worker_task_status(5, 4, "Completed")
    assert result["success"] is True
    assert backend.statements[1].startswith("UPDATE tasks SET status = $1")


async def test_client_projects_carry_progress(backend, monkeypatch):
    async def fake_progress(project_id):
        return {
            "progress": 50,
            "totalTasks": 2,
            "completedTasks": 1,
            "inProgressTasks": 0,
            "pendingTasks": 1,
        }

    monkeypatch.setattr(service, "_compute_progress", fake_progress)
    backend.queue([{"project_id": 1, "project_name": "Site", "client": None}])

    projects = await service.list_client_projects(7)

    assert projects[0]["progress"] == 50
    assert projects[0]["taskStats"] == {"total": 2, "completed": 1, "inProgress": 0, "pending": 1}
    assert backend.calls[0][2] == (7,)
