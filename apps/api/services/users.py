"""User profile services."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.saved_link import SavedLink
from models.user import User, generate_user_id
from services.persistence import (
    isoformat,
    normalize_text,
    optional_text,
    persistence_boundary,
    utcnow,
)

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_DETAIL = "Email is already in use"


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "bio": user.bio,
        "isPublic": bool(user.is_public),
        "createdAt": isoformat(user.created_at),
        "updatedAt": isoformat(user.updated_at),
    }


async def get_user_or_404(db: AsyncSession, user_id: str) -> User:
    async with persistence_boundary(db, "get_user", user_id=user_id):
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


async def _commit_user(db: AsyncSession, action: str, user_id: str) -> None:
    async with persistence_boundary(db, action, user_id=user_id):
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL_DETAIL) from exc


async def list_users_service(db: AsyncSession) -> List[Dict[str, Any]]:
    async with persistence_boundary(db, "list_users"):
        result = await db.execute(select(User).order_by(User.created_at.desc()))
        users = result.scalars().all()
    return [serialize_user(user) for user in users]


async def get_user_service(db: AsyncSession, user_id: str) -> Dict[str, Any]:
    return serialize_user(await get_user_or_404(db, user_id))


async def create_user_service(db: AsyncSession, payload: Dict[str, Any]) -> Dict[str, Any]:
    name = normalize_text(payload.get("name"))
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")

    now = utcnow()
    is_public = payload.get("is_public")
    user = User(
        id=generate_user_id(),
        name=name,
        email=optional_text(payload.get("email")),
        bio=payload.get("bio"),
        is_public=True if is_public is None else bool(is_public),
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await _commit_user(db, "create_user", user.id)
    logger.info("user_created id=%s", user.id)
    return serialize_user(user)


async def update_user_service(db: AsyncSession, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    user = await get_user_or_404(db, user_id)

    if "name" in changes:
        name = normalize_text(changes["name"])
        if not name:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        user.name = name
    if "email" in changes:
        user.email = optional_text(changes["email"])
    if "bio" in changes:
        user.bio = changes["bio"]
    if "is_public" in changes:
        if changes["is_public"] is None:
            raise HTTPException(status_code=400, detail="isPublic cannot be null")
        user.is_public = bool(changes["is_public"])
    user.updated_at = utcnow()

    await _commit_user(db, "update_user", user_id)
    logger.info("user_updated id=%s fields=%s", user_id, ",".join(sorted(changes)))
    return serialize_user(user)


async def delete_user_service(db: AsyncSession, user_id: str) -> None:
    """Remove the user's saved links and the user in a single transaction."""
    user = await get_user_or_404(db, user_id)
    async with persistence_boundary(db, "delete_user", user_id=user_id):
        removed = await db.execute(delete(SavedLink).where(SavedLink.user_id == user_id))
        await db.delete(user)
        await db.commit()
    logger.info("user_deleted id=%s saved_links_removed=%s", user_id, removed.rowcount)


async def create_demo_user_service(db: AsyncSession) -> Dict[str, Any]:
    """Create a throwaway user with a random name and email."""
    name = uuid.uuid4().hex[:7]
    email = f"{uuid.uuid4().hex[:7]}@example.com"
    return await create_user_service(db, {"name": name, "email": email})
