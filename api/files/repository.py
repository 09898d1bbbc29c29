"""
Project file metadata persistence. The bytes live under the upload directory.
"""

from __future__ import annotations

from core import fields, model

FILE_SCHEMA = {
    "fileId": fields.number,
    "fileName": fields.string,
    "originalName": fields.string,
    "filePath": fields.string,
    "fileSize": fields.number,
    "mimeType": fields.string,
    "projectId": fields.number,
    "uploadedAt": fields.date,
}


async def create_file(file: dict) -> int:
    return await model.insert("files", file, FILE_SCHEMA)


async def get_file_by_id(file_id: int) -> dict | None:
    return await model.get_one("SELECT * FROM files WHERE file_id = $1", [file_id], FILE_SCHEMA)


async def list_files_by_project(project_id: int) -> list[dict]:
    return await model.find_many(
        "SELECT * FROM files WHERE project_id = $1 ORDER BY uploaded_at DESC",
        [project_id],
        FILE_SCHEMA,
    )


async def delete_file(file_id: int) -> dict:
    return await model.remove("files", {"fileId": file_id}, FILE_SCHEMA)
