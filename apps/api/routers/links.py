"""Link CRUD router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.payloads import LinkPayload
from routers.rate_limit import write_rate_limit
from services.links import (
    create_link_service,
    delete_link_service,
    get_link_service,
    list_links_service,
    update_link_service,
)

router = APIRouter()


@router.get("")
async def list_links(
    search: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    return await list_links_service(db, search=search)


@router.post("", status_code=201)
async def create_link(
    request: LinkPayload,
    _rate_limit: None = Depends(write_rate_limit("links_create")),
    db: AsyncSession = Depends(get_db),
):
    return await create_link_service(db, request.model_dump(exclude_none=True))


@router.get("/{link_id}")
async def get_link(link_id: int, db: AsyncSession = Depends(get_db)):
    return await get_link_service(db, link_id)


@router.put("/{link_id}")
async def update_link(
    link_id: int,
    request: LinkPayload,
    db: AsyncSession = Depends(get_db),
):
    return await update_link_service(db, link_id, request.changes())


@router.delete("/{link_id}", status_code=204)
async def delete_link(link_id: int, db: AsyncSession = Depends(get_db)):
    await delete_link_service(db, link_id)
    return Response(status_code=204)
