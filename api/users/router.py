"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


def _resolve_user_id(raw_id: str, current_user: dict) -> int:
    if raw_id in ("me", "my"):
        return int(current_user["id"])
    if not raw_id.isdigit():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user id.")
    return int(raw_id)


@router.get("/users/workers")
async def list_workers(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    workers = await service.list_workers()
    return {"success": True, "workers": workers, "count": len(workers)}


@router.get("/users/staff")
async def list_staff(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    users = await service.list_staff()
    return {"success": True, "users": users, "count": len(users)}


@router.get("/users/admins")
async def list_admins(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    admins = await service.list_admins()
    return {"success": True, "admins": admins, "count": len(admins)}


@router.post("/users/register", status_code=status.HTTP_201_CREATED)
async def register(payload: schemas.RegisterRequest) -> dict:
    user = await service.register(payload)
    return {"message": "User registered.", "newUser": user}


@router.post("/users/login")
async def login(payload: schemas.LoginRequest) -> dict:
    return await service.login(payload)


@router.get("/users")
async def list_users(_: dict = Depends(auth_dependencies.get_current_user)) -> list[dict]:
    return await service.list_users()


@router.get("/users/{user_id}")
async def get_user(
    user_id: str,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    user = await service.get_user(_resolve_user_id(user_id, current_user))
    return {"success": True, "user": user}


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    payload: schemas.UserUpdateRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    user = await service.update_user(_resolve_user_id(user_id, current_user), payload)
    return {"message": "User updated.", "user": user}


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    await service.delete_user(_resolve_user_id(user_id, current_user))
    return {"message": "User deleted."}
