"""
Site and widget configuration schemas.

Dependencies: pydantic
System role: Site request/response validation
"""

from datetime import datetime

from pydantic import BaseModel, Field


class WidgetConfig(BaseModel):
    """Display settings consumed by sdk.js."""

    theme: str = "light"
    primary_color: str = "#3b82f6"
    position: str = "bottom-right"
    welcome_message: str = "Hi! How can I help you?"
    placeholder: str = "Ask a question..."
    show_sources: bool = True


class CreateSiteRequest(BaseModel):
    """
    Request body for POST /api/admin/sites.

    Attributes:
        name: Site display name
        domain: Host the widget is embedded on
        collection_ids: Collections searched by this site's chat
        widget_config: Omitted means the default widget config
        rate_limit: Requests per hour; 0 means the default of 100
    """

    name: str = Field(..., min_length=1, max_length=255)
    domain: str = Field(..., min_length=1, max_length=255)
    collection_ids: list[str]
    widget_config: WidgetConfig | None = None
    rate_limit: int = Field(default=0, ge=0)


class UpdateSiteRequest(BaseModel):
    """Request body for PUT /api/admin/sites/{id}; empty fields are ignored."""

    name: str | None = Field(default=None, max_length=255)
    domain: str | None = Field(default=None, max_length=255)
    collection_ids: list[str] | None = None
    widget_config: WidgetConfig | None = None
    rate_limit: int | None = Field(default=None, ge=0)


class SiteResponse(BaseModel):
    """Site as returned by the admin API."""

    id: str
    name: str
    domain: str
    collection_ids: list[str]
    widget_config: WidgetConfig
    rate_limit: int
    created_at: datetime
    updated_at: datetime


class SiteListResponse(BaseModel):
    """Wrapper for GET /api/admin/sites."""

    sites: list[SiteResponse]
