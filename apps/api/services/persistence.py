"""Shared helpers for persistence-backed services."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal Server Error"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; they are stored as UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    normalized = as_utc(value)
    return normalized.isoformat(timespec="microseconds") if normalized else None


def normalize_text(value: Any) -> str:
    return str(value or "").strip()


def optional_text(value: Any) -> Optional[str]:
    text = normalize_text(value)
    return text or None


def normalize_tags(value: Any) -> List[str]:
    """Strip tags, drop empty ones and de-duplicate keeping first occurrence."""
    if not value:
        return []
    seen = set()
    tags: List[str] = []
    for raw in value:
        tag = normalize_text(raw)
        if not tag or tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
    return tags


@asynccontextmanager
async def persistence_boundary(db: AsyncSession, action: str, **context: Any) -> AsyncIterator[None]:
    """Turn unexpected database failures into a generic 500 after rolling back."""
    try:
        yield
    except SQLAlchemyError as exc:
        await db.rollback()
        details = " ".join(f"{key}={value}" for key, value in context.items())
        logger.exception("persistence_failure action=%s %s", action, details)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL) from exc
