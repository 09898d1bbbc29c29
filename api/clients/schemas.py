"""
Client API schemas (request models).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Plan = Literal["Oro", "Esmeralda", "Premium"]


class ClientCreateRequest(BaseModel):
    userId: int = Field(..., ge=1)
    contactInfo: str = Field(..., min_length=1)
    address: str | None = None
    additionalInfo: str | None = None
    plan: Plan = "Oro"


class ClientUpdateRequest(BaseModel):
    contactInfo: str | None = None
    address: str | None = None
    additionalInfo: str | None = None
    plan: Plan | None = None


class ClientRegisterRequest(BaseModel):
    """
    Creates the user account and the client profile in one call.
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=128)
    contactInfo: str = Field(..., min_length=1)
    address: str | None = None
    additionalInfo: str | None = None
    plan: Plan = "Oro"
