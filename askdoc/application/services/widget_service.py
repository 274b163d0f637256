"""
Widget configuration service.

Dependencies: askdoc.boundary.db.CRUD
System role: Public widget bootstrap data
"""

from sqlalchemy.ext.asyncio import AsyncSession

from askdoc.boundary.db.CRUD.site_crud import site_crud
from askdoc.boundary.db.models.site_model import DEFAULT_WIDGET_CONFIG
from askdoc.core.exceptions import NotFoundError
from askdoc.models.chat import WidgetConfigResponse
from askdoc.models.site import WidgetConfig


class WidgetService:
    """Serves the display settings a widget needs before its first chat."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_config(self, site_id: str, base_url: str) -> WidgetConfigResponse:
        """
        Build the widget bootstrap payload for a site.

        Args:
            site_id: Site id from the embed snippet
            base_url: Public base URL the widget should call back to

        Raises:
            NotFoundError: If the site does not exist
        """
        site = await site_crud.get_by_id(self.db, site_id)
        if site is None:
            raise NotFoundError("site not found", site_id)

        return WidgetConfigResponse(
            site_id=site.id,
            name=site.name,
            config=WidgetConfig(**{**DEFAULT_WIDGET_CONFIG, **(site.widget_config or {})}),
            base_url=base_url,
        )
