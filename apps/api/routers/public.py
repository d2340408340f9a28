"""Public link discovery router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from services.links import list_public_links_service

router = APIRouter()


@router.get("/links")
async def list_public_links(
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(
        default=settings.PUBLIC_LINKS_DEFAULT_LIMIT,
        ge=1,
        le=settings.PUBLIC_LINKS_MAX_LIMIT,
    ),
    db: AsyncSession = Depends(get_db),
):
    return await list_public_links_service(db, search=search, page=page, limit=limit)
