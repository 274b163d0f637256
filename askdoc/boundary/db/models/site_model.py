"""
Site ORM model.

A site binds collections to a public chat widget.

Dependencies: sqlalchemy, askdoc.boundary.db.base
System role: Widget tenant persistence
"""

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askdoc.boundary.db.base import Base, TimestampMixin, UUIDMixin

DEFAULT_WIDGET_CONFIG: dict = {
    "theme": "light",
    "primary_color": "#3b82f6",
    "position": "bottom-right",
    "welcome_message": "Hi! How can I help you?",
    "placeholder": "Ask a question...",
    "show_sources": True,
}

DEFAULT_RATE_LIMIT = 100


class SiteModel(Base, UUIDMixin, TimestampMixin):
    """
    Site ORM model.

    collection_ids is an ordered JSON list; the store does not check that
    the referenced collections exist. rate_limit is informational.

    Attributes:
        id: UUID string primary key (auto-generated)
        name: Display name shown in the widget header
        domain: Host the widget is embedded on
        collection_ids: Ordered list of collection ids searched by chat
        widget_config: Theme, color, position, welcome text, placeholder, show_sources
        rate_limit: Requests per hour (advisory)
        sessions: Chat sessions opened through this site
        created_at: Creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        sessions: One-to-many with SessionModel (SET NULL on site deletion)
    """

    __tablename__ = "sites"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    domain: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    collection_ids: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Ordered collection ids",
    )

    widget_config: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: dict(DEFAULT_WIDGET_CONFIG),
        doc="Widget display configuration",
    )

    rate_limit: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_RATE_LIMIT,
    )

    # Relationships
    sessions = relationship(
        "SessionModel",
        back_populates="site",
        passive_deletes=True,
    )
