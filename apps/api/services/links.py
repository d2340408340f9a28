"""Link CRUD, search and public discovery services."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.collection import Collection
from models.link import Link
from models.saved_link import SavedLink
from services.persistence import (
    isoformat,
    normalize_tags,
    normalize_text,
    persistence_boundary,
    utcnow,
)

logger = logging.getLogger(__name__)


def link_matches_search(link: Link, search: Optional[str]) -> bool:
    """Case-insensitive title/description substring, or an exact tag match."""
    needle = normalize_text(search)
    if not needle:
        return True
    lowered = needle.lower()
    if lowered in (link.title or "").lower():
        return True
    if lowered in (link.description or "").lower():
        return True
    return needle in (link.tags or [])


def paginate(items: Sequence[Any], page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    total = len(items)
    start = (page - 1) * limit
    rows = list(items[start:start + limit])
    return rows, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }


def serialize_collection_ref(collection: Optional[Collection]) -> Optional[Dict[str, Any]]:
    if collection is None:
        return None
    return {"id": collection.id, "name": collection.name, "color": collection.color}


def serialize_link(
    link: Link,
    collection: Optional[Collection] = None,
    include_collection: bool = False,
) -> Dict[str, Any]:
    payload = {
        "id": link.id,
        "title": link.title,
        "url": link.url,
        "description": link.description,
        "tags": list(link.tags or []),
        "isPublic": bool(link.is_public),
        "collectionId": link.collection_id,
        "createdAt": isoformat(link.created_at),
        "updatedAt": isoformat(link.updated_at),
    }
    if include_collection:
        payload["collection"] = serialize_collection_ref(collection)
    return payload


async def collections_by_id(db: AsyncSession, ids: Iterable[Optional[int]]) -> Dict[int, Collection]:
    """Resolve weak collection references; dangling ids are simply absent."""
    wanted = {collection_id for collection_id in ids if collection_id is not None}
    if not wanted:
        return {}
    result = await db.execute(select(Collection).where(Collection.id.in_(wanted)))
    return {row.id: row for row in result.scalars().all()}


def _ordered(query):
    return query.order_by(Link.created_at.desc(), Link.id.desc())


async def get_link_or_404(db: AsyncSession, link_id: int) -> Link:
    async with persistence_boundary(db, "get_link", link_id=link_id):
        result = await db.execute(select(Link).where(Link.id == link_id))
        link = result.scalar_one_or_none()
    if not link:
        raise HTTPException(status_code=404, detail="Link not found")
    return link


async def list_links_service(db: AsyncSession, search: Optional[str] = None) -> List[Dict[str, Any]]:
    async with persistence_boundary(db, "list_links"):
        result = await db.execute(_ordered(select(Link)))
        links = result.scalars().all()
    return [serialize_link(link) for link in links if link_matches_search(link, search)]


async def get_link_service(db: AsyncSession, link_id: int) -> Dict[str, Any]:
    link = await get_link_or_404(db, link_id)
    return serialize_link(link)


async def create_link_service(db: AsyncSession, payload: Dict[str, Any]) -> Dict[str, Any]:
    title = normalize_text(payload.get("title"))
    url = normalize_text(payload.get("url"))
    if not title or not url:
        raise HTTPException(status_code=400, detail="Title and URL are required")

    now = utcnow()
    link = Link(
        title=title,
        url=url,
        description=payload.get("description"),
        tags=normalize_tags(payload.get("tags")),
        is_public=bool(payload.get("is_public") or False),
        collection_id=payload.get("collection_id"),
        created_at=now,
        updated_at=now,
    )
    async with persistence_boundary(db, "create_link"):
        db.add(link)
        await db.commit()
    logger.info("link_created id=%s public=%s collection=%s", link.id, link.is_public, link.collection_id)
    return serialize_link(link)


async def update_link_service(db: AsyncSession, link_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
    link = await get_link_or_404(db, link_id)

    for field, label in (("title", "Title"), ("url", "URL")):
        if field in changes:
            value = normalize_text(changes[field])
            if not value:
                raise HTTPException(status_code=400, detail=f"{label} cannot be empty")
            setattr(link, field, value)
    if "description" in changes:
        link.description = changes["description"]
    if "tags" in changes:
        link.tags = normalize_tags(changes["tags"])
    if "is_public" in changes:
        if changes["is_public"] is None:
            raise HTTPException(status_code=400, detail="isPublic cannot be null")
        link.is_public = bool(changes["is_public"])
    if "collection_id" in changes:
        link.collection_id = changes["collection_id"]
    link.updated_at = utcnow()

    async with persistence_boundary(db, "update_link", link_id=link_id):
        await db.commit()
    logger.info("link_updated id=%s fields=%s", link_id, ",".join(sorted(changes)))
    return serialize_link(link)


async def delete_link_service(db: AsyncSession, link_id: int) -> None:
    link = await get_link_or_404(db, link_id)
    async with persistence_boundary(db, "delete_link", link_id=link_id):
        await db.execute(delete(SavedLink).where(SavedLink.link_id == link_id))
        await db.delete(link)
        await db.commit()
    logger.info("link_deleted id=%s", link_id)


async def list_public_links_service(
    db: AsyncSession,
    *,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    async with persistence_boundary(db, "list_public_links"):
        result = await db.execute(_ordered(select(Link).where(Link.is_public.is_(True))))
        links = [link for link in result.scalars().all() if link_matches_search(link, search)]
        page_rows, pagination = paginate(links, page, limit)
        collections = await collections_by_id(db, (link.collection_id for link in page_rows))

    logger.info(
        "public_links_search query=%s page=%s limit=%s total=%s",
        normalize_text(search),
        page,
        limit,
        pagination["total"],
    )
    return {
        "links": [
            serialize_link(link, collections.get(link.collection_id), include_collection=True)
            for link in page_rows
        ],
        "pagination": pagination,
    }
