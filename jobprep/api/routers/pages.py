"""Root page and static assets.

Routes
------
GET /, /index.html    Serve ``index.html`` and count the visit.
GET /{path}           Any other file under ``settings.public_dir``.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse, Response

from jobprep.config import settings

router = APIRouter()

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def _serve(relative: str) -> Response:
    """Return the public file at *relative*, or a plain-text 404."""
    root = settings.public_dir.resolve()
    target = (root / relative.lstrip("/")).resolve()
    if not target.is_relative_to(root) or not target.is_file():
        return PlainTextResponse("Not found", status_code=404)
    media_type = MIME_TYPES.get(target.suffix.lower(), DEFAULT_MIME_TYPE)
    return FileResponse(target, media_type=media_type)


@router.get("/", include_in_schema=False)
@router.get("/index.html", include_in_schema=False)
async def index(request: Request) -> Response:
    await request.app.state.analytics.record_visit()
    return _serve("index.html")


@router.get("/{path:path}", include_in_schema=False)
async def static_file(path: str) -> Response:
    return _serve(path)
