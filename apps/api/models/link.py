"""Link model."""

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text

from database import Base


class Link(Base):
    """A bookmarked URL with tags and an optional parent collection."""

    __tablename__ = "links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    is_public = Column(Boolean, nullable=False, default=False, index=True)
    # Weak reference: collections may be deleted while links still point at them.
    collection_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
