"""Tag summary router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.payloads import TagColorPayload
from services.tags import list_tags_service, set_tag_color_service

router = APIRouter()


@router.get("")
async def list_tags(
    search: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    return await list_tags_service(db, search=search)


@router.put("/{name}")
async def set_tag_color(
    name: str,
    request: TagColorPayload,
    db: AsyncSession = Depends(get_db),
):
    return await set_tag_color_service(db, name, request.color)
