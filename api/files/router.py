"""
Project file endpoints.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import FileResponse

from auth import dependencies as auth_dependencies
from core.errors import NotFound

from . import service

router = APIRouter()


@router.post("/files/{project_id}", status_code=status.HTTP_201_CREATED)
async def upload_file(
    project_id: int,
    file: UploadFile = File(...),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    stored = await service.upload_file(project_id, file)
    return {"success": True, "file": stored}


@router.get("/files/project/{project_id}")
async def list_project_files(
    project_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    files = await service.list_project_files(project_id)
    return {"success": True, "files": files, "count": len(files)}


@router.get("/files/download/{file_id}")
async def download_file(
    file_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> FileResponse:
    file = await service.get_file(file_id)
    path = Path(file.get("filePath") or "")
    if not path.is_file():
        raise NotFound("File is missing from storage.")
    return FileResponse(
        path,
        filename=file.get("originalName") or path.name,
        media_type=file.get("mimeType") or "application/octet-stream",
    )


@router.delete("/files/{file_id}")
async def delete_file(
    file_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_file(file_id)
