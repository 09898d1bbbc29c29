"""
Project API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tasks.schemas import TaskStatus

ProjectStatus = TaskStatus


class ProjectCreateRequest(BaseModel):
    clientId: int = Field(..., ge=1)
    projectName: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    status: ProjectStatus | None = None


class ProjectUpdateRequest(BaseModel):
    clientId: int | None = Field(default=None, ge=1)
    projectName: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: ProjectStatus | None = None


class ProjectStatusRequest(BaseModel):
    status: ProjectStatus
