"""
User persistence.
"""

from __future__ import annotations

from core import fields, model
from core.db import ExecutionResult

ROLES = ("Admin", "Client", "Worker")

# Older rows store the role as its index.
LEGACY_ROLE_CODES = {"0": "Admin", "1": "Client", "2": "Worker"}

USER_SCHEMA = {
    "userId": fields.number,
    "name": fields.string,
    "email": fields.string,
    "passwordHash": fields.string,
    "password": fields.transient,
    "role": fields.enum(ROLES, aliases=LEGACY_ROLE_CODES),
    "createdAt": fields.date,
    "updatedAt": fields.date,
}

_USER_COLUMNS = "user_id, name, email, password_hash, role, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def list_users() -> list[dict]:
    return await model.find_many(
        f"SELECT {_USER_COLUMNS} FROM users ORDER BY user_id",
        [],
        USER_SCHEMA,
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await model.get_one(
        f"SELECT {_USER_COLUMNS} FROM users WHERE user_id = $1",
        [user_id],
        USER_SCHEMA,
    )


async def get_user_by_email(email: str) -> dict | None:
    return await model.get_one(
        f"SELECT {_USER_COLUMNS} FROM users WHERE lower(email) = lower($1)",
        [normalize_email(email)],
        USER_SCHEMA,
    )


def role_filter_values(roles: list[str]) -> list[str]:
    """Role names plus the legacy codes stored for them."""
    names = list(roles)
    return names + [code for code, name in LEGACY_ROLE_CODES.items() if name in names]


async def list_users_by_roles(roles: list[str]) -> list[dict]:
    return await model.find_many(
        f"SELECT {_USER_COLUMNS} FROM users WHERE role = ANY($1::text[]) ORDER BY name ASC",
        [role_filter_values(roles)],
        USER_SCHEMA,
    )


async def create_user(user: dict) -> int:
    return await model.insert("users", user, USER_SCHEMA)


async def update_user(user_id: int, data: dict) -> ExecutionResult:
    return await model.update("users", data, {"userId": user_id}, USER_SCHEMA)


async def delete_user(user_id: int) -> dict:
    return await model.remove("users", {"userId": user_id}, USER_SCHEMA)
