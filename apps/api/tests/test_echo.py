from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func
from sqlalchemy.future import select

import echo_server
from models.user import User
from routers import echo
from services.users import create_demo_user_service


@pytest.fixture
def echo_client(monkeypatch):
    recorder = AsyncMock()
    monkeypatch.setattr(echo, "record_demo_user", recorder)
    return TestClient(echo_server.app), recorder


def test_echo_returns_messages_unchanged(echo_client):
    client, recorder = echo_client
    with client.websocket_connect("/") as websocket:
        websocket.send_text("hello vault")
        assert websocket.receive_text() == "hello vault"
        websocket.send_bytes(b"\x00\x01binary")
        assert websocket.receive_bytes() == b"\x00\x01binary"
    assert recorder.await_count == 2


def test_plain_http_request_is_rejected(echo_client):
    client, _ = echo_client
    resp = client.get("/")
    assert resp.status_code == 400
    assert resp.text == "Upgrade failed"


@pytest.mark.asyncio
async def test_record_demo_user_respects_flag(monkeypatch):
    creator = AsyncMock()
    monkeypatch.setattr(echo, "create_demo_user_service", creator)
    monkeypatch.setattr(echo.settings, "ECHO_CREATE_DEMO_USERS", False)
    await echo.record_demo_user()
    creator.assert_not_awaited()


@pytest.mark.asyncio
async def test_record_demo_user_swallows_store_errors(monkeypatch):
    monkeypatch.setattr(echo.settings, "ECHO_CREATE_DEMO_USERS", True)
    monkeypatch.setattr(echo, "create_demo_user_service", AsyncMock(side_effect=RuntimeError("db down")))
    await echo.record_demo_user()


@pytest.mark.asyncio
async def test_create_demo_user_has_random_identity(session_maker):
    async with session_maker() as session:
        first = await create_demo_user_service(session)
        second = await create_demo_user_service(session)
        count = (await session.execute(select(func.count(User.id)))).scalar()

    assert count == 2
    assert len(first["name"]) == 7
    assert first["email"].endswith("@example.com")
    assert first["name"] != second["name"]
