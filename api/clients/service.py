"""
Client business logic.

A client owns exactly one user account. Registration creates both rows and
deletion removes both; the second step is undone by hand when it fails since
each repository call runs in its own transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status

from auth import security
from core.errors import NotFound
from users import repository as user_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


async def list_clients() -> list[dict]:
    return await repository.list_clients()


async def get_client(client_id: int) -> dict:
    client = await repository.get_client_by_id(client_id)
    if client is None:
        raise NotFound("Client not found.")
    return client


async def create_client(payload: schemas.ClientCreateRequest) -> dict:
    client = {
        "userId": payload.userId,
        "contactInfo": payload.contactInfo,
        "address": payload.address,
        "additionalInfo": payload.additionalInfo,
        "plan": payload.plan or repository.DEFAULT_PLAN,
    }
    client_id = await repository.create_client(client)
    return {"clientId": client_id, **client}


async def update_client(client_id: int, payload: schemas.ClientUpdateRequest) -> dict:
    await get_client(client_id)

    data = payload.model_dump(exclude_none=True)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")
    data["updatedAt"] = datetime.now(timezone.utc)

    result = await repository.update_client(client_id, data)
    if result.affected_rows == 0:
        raise NotFound("Client not found.")
    return await get_client(client_id)


async def delete_client(client_id: int) -> dict:
    client = await get_client(client_id)

    await repository.delete_client(client_id)
    if client.get("userId"):
        await user_repository.delete_user(int(client["userId"]))

    logger.info("client_deleted client_id=%s user_id=%s", client_id, client.get("userId"))
    return {"success": True, "message": "Client and owning user deleted."}


async def register_client(payload: schemas.ClientRegisterRequest) -> dict:
    existing = await user_repository.get_user_by_email(payload.email)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        )

    user = {
        "name": payload.name,
        "email": user_repository.normalize_email(payload.email),
        "passwordHash": security.hash_password(payload.password),
        "role": "Client",
    }
    user_id = await user_repository.create_user(user)

    client = {
        "userId": user_id,
        "contactInfo": payload.contactInfo,
        "address": payload.address,
        "additionalInfo": payload.additionalInfo,
        "plan": payload.plan or repository.DEFAULT_PLAN,
    }
    try:
        client_id = await repository.create_client(client)
    except Exception:
        logger.exception("client_register_failed user_id=%s", user_id)
        await user_repository.delete_user(user_id)
        raise

    logger.info("client_registered client_id=%s user_id=%s", client_id, user_id)
    return {
        "user": {"userId": user_id, "name": payload.name, "email": user["email"], "role": "Client"},
        "client": {"clientId": client_id, **client},
    }
