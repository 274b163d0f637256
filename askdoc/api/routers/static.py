"""
Static asset endpoints.

Routes:
- GET /sdk.js - Embeddable widget script
- GET /admin, /admin/{path} - Admin shell files

Dependencies: fastapi
System role: Serves the widget SDK and the admin UI
"""

from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"
ADMIN_DIR = STATIC_DIR / "admin"

router = APIRouter(tags=["static"])


@router.get("/sdk.js", include_in_schema=False)
async def sdk_script() -> FileResponse:
    """Serve the widget script."""
    return FileResponse(STATIC_DIR / "sdk.js", media_type="application/javascript")


def _admin_file(path: str) -> Path:
    """Resolve a path under the admin directory; directories map to index.html."""
    root = ADMIN_DIR.resolve()
    target = (root / path).resolve() if path else root
    if target != root and root not in target.parents:
        raise HTTPException(status_code=404, detail="File not found")
    if target.is_dir():
        target = target / "index.html"
    if not target.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return target


@router.get("/admin", include_in_schema=False)
async def admin_index() -> FileResponse:
    """Serve the admin shell."""
    return FileResponse(_admin_file(""))


@router.get("/admin/{path:path}", include_in_schema=False)
async def admin_asset(path: str) -> FileResponse:
    """Serve an admin shell asset."""
    return FileResponse(_admin_file(path))
