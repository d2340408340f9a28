"""WebSocket echo endpoint.

Every inbound message is sent straight back. As a side effect each message
also registers a throwaway demo user (see ``ECHO_CREATE_DEMO_USERS``).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse

from config import settings
from database import async_session_maker
from services.users import create_demo_user_service

router = APIRouter()
logger = logging.getLogger(__name__)


async def record_demo_user() -> None:
    if not settings.ECHO_CREATE_DEMO_USERS:
        return
    try:
        async with async_session_maker() as db:
            user = await create_demo_user_service(db)
        logger.info("echo_demo_user_created id=%s", user["id"])
    except Exception:
        logger.exception("echo_demo_user_failed")


@router.get("/")
async def upgrade_required():
    return PlainTextResponse("Upgrade failed", status_code=400)


@router.websocket("/")
async def echo(websocket: WebSocket):
    await websocket.accept()
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            await record_demo_user()
            if message.get("text") is not None:
                await websocket.send_text(message["text"])
            elif message.get("bytes") is not None:
                await websocket.send_bytes(message["bytes"])
    except WebSocketDisconnect:
        pass
    logger.debug("echo_connection_closed")
