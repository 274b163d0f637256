"""API routers."""

from .admin import router as admin_router
from .health import router as health_router
from .static import router as static_router
from .widget import router as widget_router

__all__ = [
    "admin_router",
    "health_router",
    "static_router",
    "widget_router",
]
