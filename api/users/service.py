"""
User business logic: registration, login and account management.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status

from auth import security
from core.errors import NotFound

from . import repository, schemas

logger = logging.getLogger(__name__)


def public_user(user: dict) -> dict:
    """
    User record without credential fields.
    """
    return {k: v for k, v in user.items() if k not in ("passwordHash", "password")}


async def register(payload: schemas.RegisterRequest) -> dict:
    existing = await repository.get_user_by_email(payload.email)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        )

    user_id = await repository.create_user(
        {
            "name": payload.name,
            "email": repository.normalize_email(payload.email),
            "passwordHash": security.hash_password(payload.password),
            "role": payload.role,
        }
    )
    user = await repository.get_user_by_id(user_id)
    if user is None:
        raise NotFound("Registered user could not be read back.")

    logger.info("user_registered user_id=%s role=%s", user_id, payload.role)
    return public_user(user)


async def login(payload: schemas.LoginRequest) -> dict:
    user = await repository.get_user_by_email(payload.email)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    if not security.verify_password(payload.password, str(user.get("passwordHash") or "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    access_token = security.build_access_token(
        user_id=int(user["userId"]),
        email=str(user["email"]),
        role=user.get("role"),
    )
    return {"accessToken": access_token, "user": public_user(user)}


async def list_users() -> list[dict]:
    return [public_user(u) for u in await repository.list_users()]


async def get_user(user_id: int) -> dict:
    user = await repository.get_user_by_id(user_id)
    if user is None:
        raise NotFound("User not found.")
    return public_user(user)


async def list_workers() -> list[dict]:
    return [public_user(u) for u in await repository.list_users_by_roles(["Worker"])]


async def list_admins() -> list[dict]:
    return [public_user(u) for u in await repository.list_users_by_roles(["Admin"])]


async def list_staff() -> list[dict]:
    return [public_user(u) for u in await repository.list_users_by_roles(["Worker", "Admin"])]


async def update_user(user_id: int, payload: schemas.UserUpdateRequest) -> dict:
    data: dict = {}
    if payload.name:
        data["name"] = payload.name
    if payload.email:
        data["email"] = repository.normalize_email(payload.email)
    if payload.password:
        data["passwordHash"] = security.hash_password(payload.password)
    if payload.role:
        data["role"] = payload.role
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    data["updatedAt"] = datetime.now(timezone.utc)
    result = await repository.update_user(user_id, data)
    if result.affected_rows == 0:
        raise NotFound("User not found.")
    return await get_user(user_id)


async def delete_user(user_id: int) -> None:
    await repository.delete_user(user_id)
    logger.info("user_deleted user_id=%s", user_id)
