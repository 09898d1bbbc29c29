"""
FAQ API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FaqCreateRequest(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class FaqUpdateRequest(BaseModel):
    question: str | None = None
    answer: str | None = None
