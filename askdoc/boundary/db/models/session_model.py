"""
Session ORM model.

Represents a widget conversation thread.

Dependencies: sqlalchemy, askdoc.boundary.db.base
System role: Chat session persistence
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askdoc.boundary.db.base import Base, TimestampMixin, UUIDMixin


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Chat session ORM model.

    Created lazily on the first message of a conversation. updated_at is
    bumped after every turn. Deleting the owning site nulls site_id;
    deleting the session cascades to its messages.

    Attributes:
        id: UUID string primary key (auto-generated)
        site_id: Owning site (nullable, SET NULL on site delete)
        site: Owning SiteModel
        messages: Ordered MessageModel rows
        created_at: Session creation timestamp (UTC)
        updated_at: Last turn timestamp (UTC)
    """

    __tablename__ = "sessions"

    site_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("sites.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    site = relationship("SiteModel", back_populates="sessions")

    messages = relationship(
        "MessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageModel.created_at",
    )
