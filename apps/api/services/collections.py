"""Collection CRUD services."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.collection import Collection
from models.link import Link
from services.links import serialize_link
from services.persistence import (
    isoformat,
    normalize_text,
    persistence_boundary,
    utcnow,
)

logger = logging.getLogger(__name__)


def serialize_collection(collection: Collection, link_count: Optional[int] = None) -> Dict[str, Any]:
    payload = {
        "id": collection.id,
        "name": collection.name,
        "description": collection.description,
        "color": collection.color,
        "isPublic": bool(collection.is_public),
        "createdAt": isoformat(collection.created_at),
        "updatedAt": isoformat(collection.updated_at),
    }
    if link_count is not None:
        payload["linkCount"] = int(link_count)
    return payload


async def get_collection_or_404(db: AsyncSession, collection_id: int) -> Collection:
    async with persistence_boundary(db, "get_collection", collection_id=collection_id):
        result = await db.execute(select(Collection).where(Collection.id == collection_id))
        collection = result.scalar_one_or_none()
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection


async def list_collections_service(db: AsyncSession) -> List[Dict[str, Any]]:
    async with persistence_boundary(db, "list_collections"):
        result = await db.execute(
            select(Collection).order_by(Collection.created_at.desc(), Collection.id.desc())
        )
        collections = result.scalars().all()
        count_rows = await db.execute(
            select(Link.collection_id, func.count(Link.id))
            .where(Link.collection_id.is_not(None))
            .group_by(Link.collection_id)
        )
        counts = {collection_id: count for collection_id, count in count_rows.all()}
    return [serialize_collection(row, counts.get(row.id, 0)) for row in collections]


async def get_collection_service(db: AsyncSession, collection_id: int) -> Dict[str, Any]:
    collection = await get_collection_or_404(db, collection_id)
    async with persistence_boundary(db, "get_collection_links", collection_id=collection_id):
        result = await db.execute(
            select(Link)
            .where(Link.collection_id == collection_id)
            .order_by(Link.created_at.desc(), Link.id.desc())
        )
        links = result.scalars().all()
    payload = serialize_collection(collection, len(links))
    payload["links"] = [serialize_link(link) for link in links]
    return payload


async def create_collection_service(db: AsyncSession, payload: Dict[str, Any]) -> Dict[str, Any]:
    name = normalize_text(payload.get("name"))
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")

    now = utcnow()
    collection = Collection(
        name=name,
        description=payload.get("description"),
        color=normalize_text(payload.get("color")) or settings.DEFAULT_COLLECTION_COLOR,
        is_public=bool(payload.get("is_public") or False),
        created_at=now,
        updated_at=now,
    )
    async with persistence_boundary(db, "create_collection"):
        db.add(collection)
        await db.commit()
    logger.info("collection_created id=%s color=%s", collection.id, collection.color)
    return serialize_collection(collection)


async def update_collection_service(
    db: AsyncSession,
    collection_id: int,
    changes: Dict[str, Any],
) -> Dict[str, Any]:
    collection = await get_collection_or_404(db, collection_id)

    for field, label in (("name", "Name"), ("color", "Color")):
        if field in changes:
            value = normalize_text(changes[field])
            if not value:
                raise HTTPException(status_code=400, detail=f"{label} cannot be empty")
            setattr(collection, field, value)
    if "description" in changes:
        collection.description = changes["description"]
    if "is_public" in changes:
        if changes["is_public"] is None:
            raise HTTPException(status_code=400, detail="isPublic cannot be null")
        collection.is_public = bool(changes["is_public"])
    collection.updated_at = utcnow()

    async with persistence_boundary(db, "update_collection", collection_id=collection_id):
        await db.commit()
    logger.info("collection_updated id=%s fields=%s", collection_id, ",".join(sorted(changes)))
    return serialize_collection(collection)


async def delete_collection_service(db: AsyncSession, collection_id: int) -> None:
    """Remove only the collection row; member links keep their collectionId."""
    collection = await get_collection_or_404(db, collection_id)
    async with persistence_boundary(db, "delete_collection", collection_id=collection_id):
        await db.delete(collection)
        await db.commit()
    logger.info("collection_deleted id=%s", collection_id)
