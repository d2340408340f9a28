"""Tag summaries with persisted per-tag colors."""

from __future__ import annotations

import logging
import zlib
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import COLOR_PALETTE
from models.link import Link
from models.tag_color import TagColor
from services.persistence import as_utc, isoformat, normalize_text, persistence_boundary, utcnow

logger = logging.getLogger(__name__)


def assign_tag_color(name: str) -> str:
    """Deterministic palette pick, stable across processes and restarts."""
    return COLOR_PALETTE[zlib.crc32(name.encode("utf-8")) % len(COLOR_PALETTE)]


def summarize_tags(links: List[Link]) -> Dict[str, Dict[str, Any]]:
    summary: Dict[str, Dict[str, Any]] = {}
    for link in links:
        touched: Optional[datetime] = as_utc(link.updated_at)
        for tag in link.tags or []:
            entry = summary.setdefault(tag, {"name": tag, "count": 0, "last_used": None})
            entry["count"] += 1
            if touched and (entry["last_used"] is None or touched > entry["last_used"]):
                entry["last_used"] = touched
    return summary


def _serialize_tag(entry: Dict[str, Any], color: str) -> Dict[str, Any]:
    return {
        "name": entry["name"],
        "count": entry["count"],
        "color": color,
        "lastUsed": isoformat(entry["last_used"]),
    }


async def _load_summary(db: AsyncSession) -> Dict[str, Dict[str, Any]]:
    result = await db.execute(select(Link))
    return summarize_tags(list(result.scalars().all()))


async def _stored_colors(db: AsyncSession) -> Dict[str, str]:
    result = await db.execute(select(TagColor))
    return {row.name: row.color for row in result.scalars().all()}


async def list_tags_service(db: AsyncSession, search: Optional[str] = None) -> List[Dict[str, Any]]:
    async with persistence_boundary(db, "list_tags"):
        summary = await _load_summary(db)
        colors = await _stored_colors(db)

        missing = [name for name in summary if name not in colors]
        if missing:
            now = utcnow()
            for name in missing:
                colors[name] = assign_tag_color(name)
                db.add(TagColor(name=name, color=colors[name], created_at=now))
            try:
                await db.commit()
            except IntegrityError:
                # Another request stored the same tags first; assignment is deterministic.
                await db.rollback()
                logger.debug("tag_colors_race names=%s", ",".join(missing))
            else:
                logger.info("tag_colors_assigned count=%s", len(missing))

    needle = normalize_text(search).lower()
    entries = [entry for entry in summary.values() if needle in entry["name"].lower()]
    entries.sort(key=lambda entry: (-entry["count"], entry["name"]))
    return [_serialize_tag(entry, colors[entry["name"]]) for entry in entries]


async def set_tag_color_service(db: AsyncSession, name: str, color: Optional[str]) -> Dict[str, Any]:
    color = normalize_text(color)
    if not color:
        raise HTTPException(status_code=400, detail="Color is required")

    async with persistence_boundary(db, "set_tag_color", tag=name):
        summary = await _load_summary(db)
        entry = summary.get(name)
        if entry is None:
            raise HTTPException(status_code=404, detail="Tag not found")

        row = await db.get(TagColor, name)
        if row is None:
            db.add(TagColor(name=name, color=color, created_at=utcnow()))
        else:
            row.color = color
        await db.commit()

    logger.info("tag_color_set tag=%s color=%s", name, color)
    return _serialize_tag(entry, color)
