"""
Client persistence. A client row always belongs to a user row (`user_id`).
"""

from __future__ import annotations

from core import fields, model
from core.db import ExecutionResult
from users.repository import ROLES

PLANS = ("Oro", "Esmeralda", "Premium")
DEFAULT_PLAN = "Oro"

CLIENT_SCHEMA = {
    "clientId": fields.number,
    "userId": fields.number,
    "contactInfo": fields.string,
    "address": fields.string,
    "additionalInfo": fields.string,
    "plan": fields.enum(PLANS),
    "createdAt": fields.date,
    "updatedAt": fields.date,
}

# Client joined with its owning user.
CLIENT_DETAIL_SCHEMA = {
    **CLIENT_SCHEMA,
    "name": fields.string,
    "email": fields.string,
    "role": fields.enum(ROLES),
}


async def list_clients() -> list[dict]:
    return await model.find_many(
        """
        SELECT
          c.client_id,
          c.user_id,
          c.contact_info,
          c.address,
          c.additional_info,
          c.plan,
          c.created_at,
          c.updated_at,
          u.name,
          u.email,
          u.role
        FROM clients c
        INNER JOIN users u ON c.user_id = u.user_id
        ORDER BY c.created_at DESC
        """,
        [],
        CLIENT_DETAIL_SCHEMA,
    )


async def list_client_rows() -> list[dict]:
    return await model.find_many(
        "SELECT * FROM clients ORDER BY client_id ASC",
        [],
        CLIENT_SCHEMA,
    )


async def get_client_by_id(client_id: int) -> dict | None:
    return await model.get_one(
        "SELECT * FROM clients WHERE client_id = $1",
        [client_id],
        CLIENT_SCHEMA,
    )


async def client_exists(client_id: int) -> bool:
    return await model.exists(
        "SELECT 1 FROM clients WHERE client_id = $1 LIMIT 1",
        [client_id],
    )


async def create_client(client: dict) -> int:
    return await model.insert("clients", client, CLIENT_SCHEMA)


async def update_client(client_id: int, data: dict) -> ExecutionResult:
    return await model.update("clients", data, {"clientId": client_id}, CLIENT_SCHEMA)


async def delete_client(client_id: int) -> dict:
    return await model.remove("clients", {"clientId": client_id}, CLIENT_SCHEMA)
