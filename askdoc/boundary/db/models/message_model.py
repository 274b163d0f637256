"""
Message ORM model.

One user or assistant turn within a chat session.

Dependencies: sqlalchemy, askdoc.boundary.db.base
System role: Chat transcript persistence
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askdoc.boundary.db.base import Base, UUIDMixin, utcnow


class MessageRole(str, enum.Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageModel(Base, UUIDMixin):
    """
    Append-only chat message.

    Attributes:
        id: UUID string primary key (auto-generated)
        session_id: Owning session (CASCADE on session delete)
        role: user or assistant
        content: Message text
        sources: JSON list of citations ({document_id, filename, content, score}); assistant only
        created_at: Insert timestamp (UTC); messages are read in this order
    """

    __tablename__ = "messages"

    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped[MessageRole] = mapped_column(
        Enum(MessageRole, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    sources: Mapped[list | None] = mapped_column(JSON, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    session = relationship("SessionModel", back_populates="messages")
