"""
FAQ business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.errors import NotFound

from . import repository, schemas

logger = logging.getLogger(__name__)


async def create_faq(payload: schemas.FaqCreateRequest) -> dict:
    faq = {"question": payload.question.strip(), "answer": payload.answer.strip()}
    if not faq["question"] or not faq["answer"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Question and answer cannot be empty.",
        )

    faq_id = await repository.create_faq(faq)
    logger.info("faq_created faq_id=%s", faq_id)
    return {**faq, "faqId": faq_id}


async def get_faq(faq_id: int) -> dict:
    faq = await repository.get_faq_by_id(faq_id)
    if faq is None:
        raise NotFound("FAQ not found.")
    return faq


async def update_faq(faq_id: int, payload: schemas.FaqUpdateRequest) -> dict:
    data = {key: value for key, value in payload.model_dump().items() if value}
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields to update.")

    await get_faq(faq_id)
    await repository.update_faq(faq_id, data)
    return await get_faq(faq_id)


async def delete_faq(faq_id: int) -> dict:
    if not await repository.faq_exists(faq_id):
        return {"success": True, "message": "No action needed, FAQ does not exist."}

    await repository.delete_faq(faq_id)
    logger.info("faq_deleted faq_id=%s", faq_id)
    return {"success": True, "message": "FAQ deleted."}


async def list_faqs() -> list[dict]:
    return await repository.list_faqs()


async def search_faqs(term: str) -> list[dict]:
    term = (term or "").strip()
    if not term:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search term is required.")
    return await repository.search_faqs(term)
