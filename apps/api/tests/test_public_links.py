import math

import pytest


async def _seed(api_client, public_count=7, private_count=2):
    for index in range(public_count):
        await api_client.post(
            "/api/links",
            json={"title": f"public {index}", "url": f"https://p{index}.dev", "isPublic": True},
        )
    for index in range(private_count):
        await api_client.post("/api/links", json={"title": f"private {index}", "url": f"https://x{index}.dev"})


@pytest.mark.asyncio
async def test_public_links_defaults(api_client):
    await _seed(api_client)

    resp = await api_client.get("/api/public/links")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["pagination"] == {"page": 1, "limit": 20, "total": 7, "pages": 1}
    assert all(link["isPublic"] for link in payload["links"])
    assert [link["title"] for link in payload["links"]] == [f"public {index}" for index in range(6, -1, -1)]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [1, 2, 3, 7, 10])
async def test_pages_concatenate_to_full_result(api_client, limit):
    await _seed(api_client)
    full = (await api_client.get("/api/public/links", params={"limit": 100})).json()["links"]

    first = (await api_client.get("/api/public/links", params={"limit": limit})).json()
    pages = first["pagination"]["pages"]
    assert pages == math.ceil(7 / limit)

    collected = []
    for page in range(1, pages + 1):
        payload = (await api_client.get("/api/public/links", params={"page": page, "limit": limit})).json()
        assert payload["pagination"]["page"] == page
        assert payload["pagination"]["total"] == 7
        collected.extend(payload["links"])

    assert [link["id"] for link in collected] == [link["id"] for link in full]
    assert len({link["id"] for link in collected}) == 7


@pytest.mark.asyncio
async def test_public_links_page_past_end_is_empty(api_client):
    await _seed(api_client, public_count=2, private_count=0)
    payload = (await api_client.get("/api/public/links", params={"page": 5, "limit": 2})).json()
    assert payload["links"] == []
    assert payload["pagination"] == {"page": 5, "limit": 2, "total": 2, "pages": 1}


@pytest.mark.asyncio
async def test_public_links_empty_store_has_zero_pages(api_client):
    payload = (await api_client.get("/api/public/links")).json()
    assert payload == {"links": [], "pagination": {"page": 1, "limit": 20, "total": 0, "pages": 0}}


@pytest.mark.asyncio
async def test_public_links_search_and_collection_projection(api_client):
    collection = (
        await api_client.post("/api/collections", json={"name": "Design", "color": "bg-pink-500"})
    ).json()
    await api_client.post(
        "/api/links",
        json={
            "title": "Figma tricks",
            "url": "https://figma.dev",
            "isPublic": True,
            "collectionId": collection["id"],
        },
    )
    await api_client.post(
        "/api/links",
        json={"title": "Hidden figma", "url": "https://hidden.dev", "isPublic": False},
    )
    await api_client.post(
        "/api/links",
        json={"title": "Unrelated", "url": "https://u.dev", "isPublic": True, "tags": ["misc"]},
    )

    payload = (await api_client.get("/api/public/links", params={"search": "FIGMA"})).json()
    assert payload["pagination"]["total"] == 1
    link = payload["links"][0]
    assert link["title"] == "Figma tricks"
    assert link["collection"] == {"id": collection["id"], "name": "Design", "color": "bg-pink-500"}

    tagged = (await api_client.get("/api/public/links", params={"search": "misc"})).json()
    assert [item["title"] for item in tagged["links"]] == ["Unrelated"]
    assert tagged["links"][0]["collection"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}, {"page": "abc"}])
async def test_public_links_rejects_bad_paging(api_client, params):
    resp = await api_client.get("/api/public/links", params=params)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid request"
