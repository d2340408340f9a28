import pytest
from sqlalchemy import func
from sqlalchemy.future import select

from models.link import Link


@pytest.mark.asyncio
async def test_create_link_applies_defaults(api_client):
    resp = await api_client.post("/api/links", json={"title": "Example", "url": "https://example.com"})
    assert resp.status_code == 201
    link = resp.json()
    assert isinstance(link["id"], int)
    assert link["title"] == "Example"
    assert link["url"] == "https://example.com"
    assert link["tags"] == []
    assert link["isPublic"] is False
    assert link["collectionId"] is None
    assert link["description"] is None
    assert link["createdAt"] and link["updatedAt"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"url": "https://example.com"},
        {"title": "No url"},
        {"title": "   ", "url": "https://example.com"},
        {},
    ],
)
async def test_create_link_requires_title_and_url(api_client, session_maker, payload):
    resp = await api_client.post("/api/links", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Title and URL are required"

    async with session_maker() as session:
        count = (await session.execute(select(func.count(Link.id)))).scalar()
    assert count == 0


@pytest.mark.asyncio
async def test_create_link_accepts_optional_fields(api_client):
    resp = await api_client.post(
        "/api/links",
        json={
            "title": "FastAPI",
            "url": "https://fastapi.tiangolo.com",
            "description": "Docs",
            "tags": [" python ", "web", "", "python"],
            "isPublic": True,
            "collectionId": 42,
        },
    )
    assert resp.status_code == 201
    link = resp.json()
    assert link["tags"] == ["python", "web"]
    assert link["isPublic"] is True
    assert link["collectionId"] == 42


@pytest.mark.asyncio
async def test_update_link_changes_only_present_fields(api_client):
    created = (await api_client.post("/api/links", json={"title": "Example", "url": "https://example.com"})).json()

    resp = await api_client.put(f"/api/links/{created['id']}", json={"tags": ["x", "y"]})
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["tags"] == ["x", "y"]
    assert updated["title"] == "Example"
    assert updated["url"] == "https://example.com"
    assert updated["updatedAt"] >= created["updatedAt"]
    assert updated["createdAt"] == created["createdAt"]

    fetched = (await api_client.get(f"/api/links/{created['id']}")).json()
    assert fetched["tags"] == ["x", "y"]


@pytest.mark.asyncio
async def test_update_link_can_clear_collection_and_rejects_empty_title(api_client):
    created = (
        await api_client.post("/api/links", json={"title": "A", "url": "https://a.dev", "collectionId": 3})
    ).json()

    cleared = await api_client.put(f"/api/links/{created['id']}", json={"collectionId": None})
    assert cleared.status_code == 200
    assert cleared.json()["collectionId"] is None

    rejected = await api_client.put(f"/api/links/{created['id']}", json={"title": ""})
    assert rejected.status_code == 400
    assert (await api_client.get(f"/api/links/{created['id']}")).json()["title"] == "A"


@pytest.mark.asyncio
async def test_update_and_delete_missing_link_return_404(api_client):
    assert (await api_client.put("/api/links/999", json={"title": "x"})).status_code == 404
    assert (await api_client.delete("/api/links/999")).status_code == 404
    assert (await api_client.get("/api/links/999")).status_code == 404


@pytest.mark.asyncio
async def test_delete_link_returns_no_content(api_client):
    created = (await api_client.post("/api/links", json={"title": "Gone", "url": "https://gone.dev"})).json()

    resp = await api_client.delete(f"/api/links/{created['id']}")
    assert resp.status_code == 204
    assert resp.content == b""
    assert (await api_client.get(f"/api/links/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_list_links_is_newest_first_and_stable(api_client):
    titles = ["first", "second", "third"]
    for title in titles:
        await api_client.post("/api/links", json={"title": title, "url": f"https://{title}.dev"})

    first = (await api_client.get("/api/links")).json()
    second = (await api_client.get("/api/links")).json()
    assert [link["title"] for link in first] == ["third", "second", "first"]
    assert first == second


@pytest.mark.asyncio
async def test_search_matches_title_description_or_exact_tag(api_client):
    await api_client.post("/api/links", json={"title": "Python Tips", "url": "https://a.dev"})
    await api_client.post(
        "/api/links",
        json={"title": "Other", "url": "https://b.dev", "description": "all about PYTHON"},
    )
    await api_client.post("/api/links", json={"title": "Tagged", "url": "https://c.dev", "tags": ["python"]})
    await api_client.post("/api/links", json={"title": "Near miss", "url": "https://d.dev", "tags": ["pythonic"]})

    resp = await api_client.get("/api/links", params={"search": "python"})
    assert resp.status_code == 200
    assert [link["title"] for link in resp.json()] == ["Tagged", "Other", "Python Tips"]

    resp = await api_client.get("/api/links", params={"search": ""})
    assert len(resp.json()) == 4
