"""Async HTTP client for the LinkVault API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from config import Settings, settings as default_settings


API_ENDPOINTS = {
    "links": "/api/links",
    "users": "/api/users",
    "collections": "/api/collections",
    "publicLinks": "/api/public/links",
    "tags": "/api/tags",
}
USER_ENDPOINTS = {"saved-links"}


class LinkVaultAPIError(Exception):
    """Non-2xx response from the API, carrying the server's message."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def get_api_base_url(settings: Optional[Settings] = None) -> str:
    """Explicit LINKVAULT_API_URL wins; otherwise pick by environment."""
    current = settings or default_settings
    if current.LINKVAULT_API_URL:
        return current.LINKVAULT_API_URL.rstrip("/")
    if current.ENVIRONMENT.lower() == "production":
        return current.DEPLOYED_API_URL.rstrip("/")
    return current.LOCAL_API_URL.rstrip("/")


def get_api_url(endpoint: str, id: Optional[Any] = None, base_url: Optional[str] = None) -> str:
    if endpoint not in API_ENDPOINTS:
        raise ValueError(f"Unknown endpoint: {endpoint}")
    url = f"{base_url if base_url is not None else get_api_base_url()}{API_ENDPOINTS[endpoint]}"
    if id is not None:
        return f"{url}/{id}"
    return url


def get_user_api_url(user_id: str, endpoint: str, base_url: Optional[str] = None) -> str:
    if endpoint not in USER_ENDPOINTS:
        raise ValueError(f"Unknown user endpoint: {endpoint}")
    return f"{get_api_url('users', user_id, base_url=base_url)}/{endpoint}"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return response.reason_phrase


class LinkVaultClient:
    """Thin coroutine wrapper over each API operation.

    Use as ``async with LinkVaultClient() as client: ...``. Pass ``transport``
    to talk to an in-process app (e.g. ``httpx.ASGITransport``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self._http = httpx.AsyncClient(transport=transport, timeout=timeout)

    async def __aenter__(self) -> "LinkVaultClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self._http.request(method, url, **kwargs)
        if response.status_code >= 400:
            raise LinkVaultAPIError(response.status_code, _error_detail(response))
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _url(self, endpoint: str, id: Optional[Any] = None) -> str:
        return get_api_url(endpoint, id, base_url=self.base_url)

    # Links
    async def list_links(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"search": search} if search else None
        return await self._request("GET", self._url("links"), params=params)

    async def get_link(self, link_id: int) -> Dict[str, Any]:
        return await self._request("GET", self._url("links", link_id))

    async def create_link(self, **fields: Any) -> Dict[str, Any]:
        return await self._request("POST", self._url("links"), json=fields)

    async def update_link(self, link_id: int, **fields: Any) -> Dict[str, Any]:
        return await self._request("PUT", self._url("links", link_id), json=fields)

    async def delete_link(self, link_id: int) -> None:
        await self._request("DELETE", self._url("links", link_id))

    # Collections
    async def list_collections(self) -> List[Dict[str, Any]]:
        return await self._request("GET", self._url("collections"))

    async def get_collection(self, collection_id: int) -> Dict[str, Any]:
        return await self._request("GET", self._url("collections", collection_id))

    async def create_collection(self, **fields: Any) -> Dict[str, Any]:
        return await self._request("POST", self._url("collections"), json=fields)

    async def update_collection(self, collection_id: int, **fields: Any) -> Dict[str, Any]:
        return await self._request("PUT", self._url("collections", collection_id), json=fields)

    async def delete_collection(self, collection_id: int) -> None:
        await self._request("DELETE", self._url("collections", collection_id))

    # Discovery
    async def list_public_links(
        self,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        return await self._request("GET", self._url("publicLinks"), params=params)

    # Users
    async def list_users(self) -> List[Dict[str, Any]]:
        return await self._request("GET", self._url("users"))

    async def create_user(self, **fields: Any) -> Dict[str, Any]:
        return await self._request("POST", self._url("users"), json=fields)

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", self._url("users", user_id))

    async def update_user(self, user_id: str, **fields: Any) -> Dict[str, Any]:
        return await self._request("PUT", self._url("users", user_id), json=fields)

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", self._url("users", user_id))

    # Saved links
    async def list_saved_links(self, user_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", get_user_api_url(user_id, "saved-links", base_url=self.base_url))

    async def save_link(self, user_id: str, link_id: int) -> Dict[str, Any]:
        url = get_user_api_url(user_id, "saved-links", base_url=self.base_url)
        return await self._request("POST", url, json={"linkId": link_id})

    async def unsave_link(self, user_id: str, link_id: int) -> None:
        url = get_user_api_url(user_id, "saved-links", base_url=self.base_url)
        await self._request("DELETE", url, json={"linkId": link_id})

    # Tags
    async def list_tags(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"search": search} if search else None
        return await self._request("GET", self._url("tags"), params=params)

    async def set_tag_color(self, name: str, color: str) -> Dict[str, Any]:
        return await self._request("PUT", self._url("tags", quote(name, safe="")), json={"color": color})
