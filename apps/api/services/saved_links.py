"""Saved-link (user bookmark) services."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.link import Link
from models.saved_link import SavedLink
from services.links import collections_by_id, get_link_or_404, serialize_link
from services.persistence import isoformat, persistence_boundary, utcnow
from services.users import get_user_or_404

logger = logging.getLogger(__name__)

ALREADY_SAVED_DETAIL = "Link already saved"


def serialize_saved_link(saved: SavedLink, link_payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {
        "id": saved.id,
        "userId": saved.user_id,
        "linkId": saved.link_id,
        "createdAt": isoformat(saved.created_at),
    }
    if link_payload is not None:
        payload["link"] = link_payload
    return payload


def _require_link_id(link_id: Optional[int]) -> int:
    if link_id is None:
        raise HTTPException(status_code=400, detail="linkId is required")
    return link_id


async def _find_saved(db: AsyncSession, user_id: str, link_id: int) -> Optional[SavedLink]:
    result = await db.execute(
        select(SavedLink).where(SavedLink.user_id == user_id, SavedLink.link_id == link_id)
    )
    return result.scalar_one_or_none()


async def list_saved_links_service(db: AsyncSession, user_id: str) -> List[Dict[str, Any]]:
    async with persistence_boundary(db, "list_saved_links", user_id=user_id):
        result = await db.execute(
            select(SavedLink)
            .where(SavedLink.user_id == user_id)
            .order_by(SavedLink.created_at.desc(), SavedLink.id.desc())
        )
        saved_rows = result.scalars().all()
        link_ids = {row.link_id for row in saved_rows}
        links: Dict[int, Link] = {}
        if link_ids:
            link_result = await db.execute(select(Link).where(Link.id.in_(link_ids)))
            links = {link.id: link for link in link_result.scalars().all()}
        collections = await collections_by_id(db, (link.collection_id for link in links.values()))

    payloads = []
    for row in saved_rows:
        link = links.get(row.link_id)
        if link is None:
            continue
        link_payload = serialize_link(link, collections.get(link.collection_id), include_collection=True)
        payloads.append(serialize_saved_link(row, link_payload))
    return payloads


async def save_link_service(db: AsyncSession, user_id: str, link_id: Optional[int]) -> Dict[str, Any]:
    link_id = _require_link_id(link_id)
    await get_user_or_404(db, user_id)
    link = await get_link_or_404(db, link_id)

    async with persistence_boundary(db, "save_link", user_id=user_id, link_id=link_id):
        if await _find_saved(db, user_id, link_id):
            raise HTTPException(status_code=400, detail=ALREADY_SAVED_DETAIL)
        saved = SavedLink(user_id=user_id, link_id=link_id, created_at=utcnow())
        db.add(saved)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise HTTPException(status_code=400, detail=ALREADY_SAVED_DETAIL) from exc
        collections = await collections_by_id(db, [link.collection_id])

    logger.info("link_saved user=%s link=%s", user_id, link_id)
    link_payload = serialize_link(link, collections.get(link.collection_id), include_collection=True)
    return serialize_saved_link(saved, link_payload)


async def unsave_link_service(db: AsyncSession, user_id: str, link_id: Optional[int]) -> None:
    link_id = _require_link_id(link_id)
    async with persistence_boundary(db, "unsave_link", user_id=user_id, link_id=link_id):
        saved = await _find_saved(db, user_id, link_id)
        if not saved:
            raise HTTPException(status_code=404, detail="Saved link not found")
        await db.delete(saved)
        await db.commit()
    logger.info("link_unsaved user=%s link=%s", user_id, link_id)
