"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging and loads the visit counter and the
saved-link list from disk onto ``app.state.analytics`` / ``app.state.links``.
Both are process-wide and shared by every request.

Routers
-------
    /api     — job analysis (``POST /api/analyze``)
    /admin   — read-only analytics and saved-link pages
    /        — root page (counts visits) and static assets

The static router holds a catch-all route and is mounted last.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jobprep import __version__
from jobprep.config import configure_logging, settings
from jobprep.store import AnalyticsStore, LinkStore

from jobprep.api.routers import admin as admin_router
from jobprep.api.routers import analyze as analyze_router
from jobprep.api.routers import pages as pages_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load persisted counters before serving requests."""
    configure_logging()
    app.state.analytics = AnalyticsStore(settings.analytics_path).load()
    app.state.links = LinkStore(settings.links_path).load()
    yield


async def _invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies in the ``{"error": ...}`` shape."""
    return JSONResponse(
        status_code=400, content={"error": analyze_router.INVALID_INPUT_MESSAGE}
    )


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Job Prep API",
        description=(
            "Extracts the description text of a job posting from a URL or "
            "pasted text and turns it into a role classification and themed "
            "behavioral interview questions."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(RequestValidationError, _invalid_body_handler)

    app.include_router(analyze_router.router, prefix="/api", tags=["analyze"])
    app.include_router(admin_router.router, prefix="/admin", tags=["admin"])
    app.include_router(pages_router.router, tags=["pages"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn jobprep.api.app:app --reload
app = create_app()
