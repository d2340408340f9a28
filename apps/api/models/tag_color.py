"""TagColor model for stable per-tag display colors."""

from sqlalchemy import Column, DateTime, String

from database import Base


class TagColor(Base):
    __tablename__ = "tag_colors"

    name = Column(String, primary_key=True)
    color = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
