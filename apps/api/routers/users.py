"""User profile and saved-link router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.payloads import SavedLinkPayload, UserPayload
from routers.rate_limit import write_rate_limit
from services.saved_links import (
    list_saved_links_service,
    save_link_service,
    unsave_link_service,
)
from services.users import (
    create_user_service,
    delete_user_service,
    get_user_service,
    list_users_service,
    update_user_service,
)

router = APIRouter()


@router.get("")
async def list_users(db: AsyncSession = Depends(get_db)):
    return await list_users_service(db)


@router.post("", status_code=201)
async def create_user(
    request: UserPayload,
    _rate_limit: None = Depends(write_rate_limit("users_create")),
    db: AsyncSession = Depends(get_db),
):
    return await create_user_service(db, request.model_dump(exclude_none=True))


@router.get("/{user_id}")
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    return await get_user_service(db, user_id)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: UserPayload,
    db: AsyncSession = Depends(get_db),
):
    return await update_user_service(db, user_id, request.changes())


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db)):
    await delete_user_service(db, user_id)
    return Response(status_code=204)


@router.get("/{user_id}/saved-links")
async def list_saved_links(user_id: str, db: AsyncSession = Depends(get_db)):
    return await list_saved_links_service(db, user_id)


@router.post("/{user_id}/saved-links", status_code=201)
async def save_link(
    user_id: str,
    request: SavedLinkPayload,
    _rate_limit: None = Depends(write_rate_limit("saved_links_create")),
    db: AsyncSession = Depends(get_db),
):
    return await save_link_service(db, user_id, request.link_id)


@router.delete("/{user_id}/saved-links", status_code=204)
async def unsave_link(
    user_id: str,
    request: SavedLinkPayload,
    db: AsyncSession = Depends(get_db),
):
    await unsave_link_service(db, user_id, request.link_id)
    return Response(status_code=204)
