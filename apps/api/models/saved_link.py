"""SavedLink join model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from database import Base


class SavedLink(Base):
    """A user's bookmark of an existing link."""

    __tablename__ = "saved_links"
    __table_args__ = (UniqueConstraint("user_id", "link_id", name="uq_saved_links_user_link"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    link_id = Column(Integer, ForeignKey("links.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
