"""
Client API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/clients")
async def list_clients(_: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    clients = await service.list_clients()
    return {"success": True, "clients": clients, "count": len(clients)}


@router.post("/clients/register", status_code=status.HTTP_201_CREATED)
async def register_client(payload: schemas.ClientRegisterRequest) -> dict:
    created = await service.register_client(payload)
    return {"success": True, **created}


@router.post("/clients", status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: schemas.ClientCreateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    client = await service.create_client(payload)
    return {"success": True, "client": client}


@router.get("/clients/{client_id}")
async def get_client(
    client_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "client": await service.get_client(client_id)}


@router.put("/clients/{client_id}")
async def update_client(
    client_id: int,
    payload: schemas.ClientUpdateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    client = await service.update_client(client_id, payload)
    return {"success": True, "client": client}


@router.delete("/clients/{client_id}")
async def delete_client(
    client_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_client(client_id)
