from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from auth import security
from clients import schemas as client_schemas
from clients import service as client_service
from core.errors import StorageOperationFailure
from users import schemas, service


def _user_row(**overrides) -> dict:
    row = {
        "user_id": 4,
        "name": "Ana",
        "email": "ana@example.test",
        "password_hash": "hash",
        "role": "Worker",
    }
    row.update(overrides)
    return row


def test_public_user_drops_credentials():
    user = {"userId": 1, "passwordHash": "x", "password": "y", "email": "e"}
    assert service.public_user(user) == {"userId": 1, "email": "e"}


async def test_register_rejects_duplicate_email(backend):
    backend.queue(_user_row())
    payload = schemas.RegisterRequest(name="Ana", email="ANA@example.test", password="pw", role="Worker")

    with pytest.raises(HTTPException) as exc:
        await service.register(payload)
    assert exc.value.status_code == 409
    assert backend.calls[0][2] == ("ana@example.test",)


async def test_register_hashes_password_and_hides_it(backend):
    backend.queue(None, {"user_id": 4}, _user_row())
    payload = schemas.RegisterRequest(name="Ana", email="ana@example.test", password="pw", role="Worker")

    user = await service.register(payload)

    assert user["userId"] == 4
    assert "passwordHash" not in user
    insert_args = backend.calls[1][2]
    assert insert_args[0:2] == ("Ana", "ana@example.test")
    assert security.verify_password("pw", insert_args[2])


async def test_login_returns_token(backend):
    backend.queue(_user_row(password_hash=security.hash_password("pw"), role="1"))

    result = await service.login(schemas.LoginRequest(email="ana@example.test", password="pw"))

    claims = security.decode_access_token(result["accessToken"])
    assert claims["sub"] == "4"
    assert claims["role"] == "Client"
    assert "passwordHash" not in result["user"]


async def test_login_with_wrong_password(backend):
    backend.queue(_user_row(password_hash=security.hash_password("pw")))
    with pytest.raises(HTTPException) as exc:
        await service.login(schemas.LoginRequest(email="ana@example.test", password="nope"))
    assert exc.value.status_code == 401


async def test_register_client_undoes_user_when_client_insert_fails(backend):
    backend.queue(None, {"user_id": 4}, RuntimeError("clients table missing"), "DELETE 1")
    payload = client_schemas.ClientRegisterRequest(
        name="Acme",
        email="ops@acme.test",
        password="pw",
        contactInfo="555",
    )

    with pytest.raises(StorageOperationFailure):
        await client_service.register_client(payload)

    assert backend.statements[-1] == "DELETE FROM users WHERE user_id = $1"
    assert backend.calls[-1][2] == (4,)


async def test_list_workers_matches_legacy_role_codes(backend):
    backend.queue([_user_row(), _user_row(user_id=5, name="Bo", role="2")])

    workers = await service.list_workers()

    assert backend.calls[0][2] == (["Worker", "2"],)
    assert [w["role"] for w in workers] == ["Worker", "Worker"]


async def test_list_staff_matches_legacy_role_codes(backend):
    await service.list_staff()
    assert backend.calls[0][2] == (["Worker", "Admin", "0", "2"],)


async def test_update_user_returns_stored_user(backend):
    updated_at = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    backend.queue("UPDATE 1", _user_row(name="Ana Maria", updated_at=updated_at))

    user = await service.update_user(4, schemas.UserUpdateRequest(name="Ana Maria"))

    assert user["userId"] == 4
    assert user["name"] == "Ana Maria"
    assert user["updatedAt"] == "2024-03-01T09:30:00.000Z"
    assert "passwordHash" not in user
    assert backend.statements[1] == (
        "SELECT user_id, name, email, password_hash, role, created_at, updated_at FROM users WHERE user_id = $1"
    )


async def test_update_client_returns_stored_client(backend):
    updated_at = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    row = {"client_id": 3, "user_id": 4, "contact_info": "555", "plan": "Oro"}
    backend.queue(row, "UPDATE 1", {**row, "plan": "Premium", "updated_at": updated_at})

    client = await client_service.update_client(3, client_schemas.ClientUpdateRequest(plan="Premium"))

    assert client == {
        "clientId": 3,
        "userId": 4,
        "contactInfo": "555",
        "plan": "Premium",
        "updatedAt": "2024-03-01T09:30:00.000Z",
    }
