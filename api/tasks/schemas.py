"""
Task API schemas (request models).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

TaskStatus = Literal["Pending", "In Progress", "Completed"]


class TaskCreateRequest(BaseModel):
    projectId: int = Field(..., ge=1)
    workerId: int | None = None
    description: str = Field(..., min_length=1)
    status: TaskStatus | None = None


class TaskUpdateRequest(BaseModel):
    workerId: int | None = None
    description: str | None = None
    status: TaskStatus | None = None


class BulkAssignRequest(BaseModel):
    taskIds: list[int] = Field(..., min_length=1)
    workerId: int = Field(..., ge=1)


class BulkStatusRequest(BaseModel):
    taskIds: list[int] = Field(..., min_length=1)
    status: TaskStatus


class TaskStatusRequest(BaseModel):
    status: TaskStatus
