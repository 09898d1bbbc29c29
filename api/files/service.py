"""
Project file uploads.

Responsibilities:
- Read an upload with a size limit
- Write it under the configured upload directory
- Record its metadata against the owning project
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from fastapi import HTTPException, UploadFile, status

from core import config
from core.errors import NotFound
from projects import repository as project_repository

from . import repository

logger = logging.getLogger(__name__)


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )

    return bytes(buf)


def stored_file_name(original_name: str) -> str:
    """
    Millisecond timestamp prefix keeps stored names unique per upload.
    """
    return f"{int(time.time() * 1000)}-{Path(original_name).name}"


async def upload_file(project_id: int, file: UploadFile) -> dict:
    if not await project_repository.project_exists(project_id):
        raise NotFound("Project not found.")
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    settings = config.get_settings()
    data = await read_upload_bytes(file, max_bytes=settings.max_upload_bytes)

    upload_dir = Path(settings.upload_dir)
    await asyncio.to_thread(upload_dir.mkdir, parents=True, exist_ok=True)
    file_name = stored_file_name(file.filename)
    file_path = upload_dir / file_name
    await asyncio.to_thread(file_path.write_bytes, data)

    record = {
        "fileName": file_name,
        "originalName": file.filename,
        "filePath": str(file_path),
        "fileSize": len(data),
        "mimeType": file.content_type,
        "projectId": project_id,
        "uploadedAt": datetime.now(timezone.utc),
    }
    try:
        file_id = await repository.create_file(record)
    except Exception:
        await asyncio.to_thread(file_path.unlink, missing_ok=True)
        raise

    logger.info(
        "file_uploaded file_id=%s project_id=%s size_bytes=%s",
        file_id,
        project_id,
        len(data),
    )
    return {"fileId": file_id, **record}


async def list_project_files(project_id: int) -> list[dict]:
    return await repository.list_files_by_project(project_id)


async def get_file(file_id: int) -> dict:
    file = await repository.get_file_by_id(file_id)
    if file is None:
        raise NotFound("File not found.")
    return file


async def delete_file(file_id: int) -> dict:
    file = await get_file(file_id)

    if file.get("filePath"):
        await asyncio.to_thread(Path(file["filePath"]).unlink, missing_ok=True)
    await repository.delete_file(file_id)

    logger.info("file_deleted file_id=%s", file_id)
    return {"success": True, "message": "File deleted."}
