"""
FAQ API endpoints. Reads are public, writes need a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/faqs")
async def list_faqs() -> dict:
    faqs = await service.list_faqs()
    return {"success": True, "faqs": faqs, "count": len(faqs)}


@router.get("/faqs/all")
async def list_all_faqs() -> dict:
    faqs = await service.list_faqs()
    return {"success": True, "faqs": faqs, "count": len(faqs)}


@router.get("/faqs/search/{term}")
async def search_faqs(term: str) -> dict:
    faqs = await service.search_faqs(term)
    return {"success": True, "faqs": faqs, "count": len(faqs)}


@router.get("/faqs/{faq_id}")
async def get_faq(faq_id: int) -> dict:
    return {"success": True, "faq": await service.get_faq(faq_id)}


@router.post("/faqs", status_code=status.HTTP_201_CREATED)
async def create_faq(
    payload: schemas.FaqCreateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "faq": await service.create_faq(payload)}


@router.put("/faqs/{faq_id}")
async def update_faq(
    faq_id: int,
    payload: schemas.FaqUpdateRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"success": True, "faq": await service.update_faq(faq_id, payload)}


@router.delete("/faqs/{faq_id}")
async def delete_faq(
    faq_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_faq(faq_id)
