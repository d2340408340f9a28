"""Collection CRUD router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.payloads import CollectionPayload
from routers.rate_limit import write_rate_limit
from services.collections import (
    create_collection_service,
    delete_collection_service,
    get_collection_service,
    list_collections_service,
    update_collection_service,
)

router = APIRouter()


@router.get("")
async def list_collections(db: AsyncSession = Depends(get_db)):
    return await list_collections_service(db)


@router.post("", status_code=201)
async def create_collection(
    request: CollectionPayload,
    _rate_limit: None = Depends(write_rate_limit("collections_create")),
    db: AsyncSession = Depends(get_db),
):
    return await create_collection_service(db, request.model_dump(exclude_none=True))


@router.get("/{collection_id}")
async def get_collection(collection_id: int, db: AsyncSession = Depends(get_db)):
    return await get_collection_service(db, collection_id)


@router.put("/{collection_id}")
async def update_collection(
    collection_id: int,
    request: CollectionPayload,
    db: AsyncSession = Depends(get_db),
):
    return await update_collection_service(db, collection_id, request.changes())


@router.delete("/{collection_id}", status_code=204)
async def delete_collection(collection_id: int, db: AsyncSession = Depends(get_db)):
    await delete_collection_service(db, collection_id)
    return Response(status_code=204)
