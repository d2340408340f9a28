"""Request bodies shared by the API routers.

Clients send camelCase keys (``isPublic``, ``collectionId``, ``linkId``);
snake_case is accepted as well.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self) -> dict:
        """Fields the client actually sent, including explicit nulls."""
        return self.model_dump(exclude_unset=True)


class LinkPayload(CamelModel):
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    collection_id: Optional[int] = None


class CollectionPayload(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    is_public: Optional[bool] = None


class UserPayload(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    is_public: Optional[bool] = None


class SavedLinkPayload(CamelModel):
    link_id: Optional[int] = None


class TagColorPayload(CamelModel):
    color: Optional[str] = None
