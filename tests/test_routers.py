from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from auth import security
from core.errors import EmptyRecord, NotFound, StorageOperationFailure
from faqs import service as faq_service
from main import app
from projects import service as project_service
from tasks import service as task_service
from users import service as user_service


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict:
    token = security.build_access_token(user_id=7, email="w@example.test", role="Worker")
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_protected_route_requires_token(client):
    response = client.get("/tasks/1")
    assert response.status_code == 401


def test_get_task(client, auth_headers, monkeypatch):
    async def fake_get_task(task_id):
        return {"taskId": task_id, "status": "Pending"}

    monkeypatch.setattr(task_service, "get_task", fake_get_task)

    response = client.get("/tasks/3", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "task": {"taskId": 3, "status": "Pending"}}


def test_legacy_token_header(client, monkeypatch):
    async def fake_get_task(task_id):
        return {"taskId": task_id}

    monkeypatch.setattr(task_service, "get_task", fake_get_task)
    token = security.build_access_token(user_id=7, email="w@example.test")

    response = client.get("/tasks/3", headers={"accesstoken": token})
    assert response.status_code == 200


def test_static_task_routes_win_over_ids(client, auth_headers, monkeypatch):
    async def fake_stats():
        return {"total": 1}

    monkeypatch.setattr(task_service, "task_stats", fake_stats)

    response = client.get("/tasks/admin/stats", headers=auth_headers)
    assert response.json() == {"success": True, "stats": {"total": 1}}


@pytest.mark.parametrize(
    "error, status_code",
    [
        (NotFound("Task not found."), 404),
        (EmptyRecord("Cannot update with an empty record."), 400),
        (StorageOperationFailure("boom"), 500),
    ],
)
def test_mapping_errors_become_http_errors(client, auth_headers, monkeypatch, error, status_code):
    async def failing(task_id):
        raise error

    monkeypatch.setattr(task_service, "get_task", failing)

    response = client.get("/tasks/3", headers=auth_headers)
    assert response.status_code == status_code


def test_faq_reads_are_public(client, monkeypatch):
    async def fake_list():
        return [{"faqId": 1, "question": "Q", "answer": "A"}]

    monkeypatch.setattr(faq_service, "list_faqs", fake_list)

    response = client.get("/faqs")
    assert response.status_code == 200
    assert response.json()["count"] == 1


def test_faq_writes_need_token(client):
    response = client.post("/faqs", json={"question": "Q", "answer": "A"})
    assert response.status_code == 401


def test_my_projects_uses_token_subject(client, auth_headers, monkeypatch):
    seen = {}

    async def fake_projects(user_id):
        seen["user_id"] = user_id
        return []

    monkeypatch.setattr(project_service, "list_client_projects", fake_projects)

    response = client.get("/projects/my-projects", headers=auth_headers)
    assert response.json() == {"success": True, "projects": [], "count": 0}
    assert seen == {"user_id": 7}


def test_users_me_resolves_to_caller(client, auth_headers, monkeypatch):
    async def fake_get_user(user_id):
        return {"userId": user_id}

    monkeypatch.setattr(user_service, "get_user", fake_get_user)

    response = client.get("/users/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "user": {"userId": 7}}


def test_create_task_validates_payload(client, auth_headers):
    response = client.post("/tasks", json={"description": "x"}, headers=auth_headers)
    assert response.status_code == 422
