"""User model."""

from sqlalchemy import Boolean, Column, DateTime, String, Text
import uuid

from database import Base


def generate_user_id() -> str:
    """Return a collision-resistant user identifier."""
    return f"user_{uuid.uuid4().hex}"


class User(Base):
    """Profile for someone saving links. Identity is client-held; there is no auth."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_user_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=True, index=True)
    bio = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
