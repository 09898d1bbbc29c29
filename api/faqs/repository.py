"""
FAQ persistence.
"""

from __future__ import annotations

from core import fields, model
from core.db import ExecutionResult

FAQ_SCHEMA = {
    "faqId": fields.number,
    "question": fields.string,
    "answer": fields.string,
    "createdAt": fields.date,
}


async def create_faq(faq: dict) -> int:
    return await model.insert("faqs", faq, FAQ_SCHEMA)


async def get_faq_by_id(faq_id: int) -> dict | None:
    return await model.get_one("SELECT * FROM faqs WHERE faq_id = $1", [faq_id], FAQ_SCHEMA)


async def faq_exists(faq_id: int) -> bool:
    return await model.exists("SELECT faq_id FROM faqs WHERE faq_id = $1", [faq_id])


async def update_faq(faq_id: int, data: dict) -> ExecutionResult:
    return await model.update("faqs", data, {"faqId": faq_id}, FAQ_SCHEMA)


async def delete_faq(faq_id: int) -> dict:
    return await model.remove("faqs", {"faqId": faq_id}, FAQ_SCHEMA)


async def list_faqs() -> list[dict]:
    return await model.find_many("SELECT * FROM faqs ORDER BY created_at DESC", [], FAQ_SCHEMA)


async def search_faqs(term: str) -> list[dict]:
    return await model.find_many(
        """
        SELECT * FROM faqs
        WHERE question ILIKE $1 OR answer ILIKE $1
        ORDER BY created_at DESC
        """,
        [f"%{term}%"],
        FAQ_SCHEMA,
    )
