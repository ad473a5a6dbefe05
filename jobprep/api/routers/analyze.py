"""Job analysis endpoint.

Routes
------
POST /api/analyze    Body: {"url": "https://..."} or {"text": "..."}

Pasted text of at least ``settings.min_text_length`` characters wins over a
URL.  A URL is recorded in the saved-link list before it is fetched.
Every failure is reported as ``{"error": "..."}``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from jobprep.coach.analyzer import AnalysisError, AnalysisTimeout, analyze_job_text
from jobprep.config import settings
from jobprep.scraper.fetcher import FetchError, fetch_job_text
from jobprep.scraper.models import ExtractionMethod, ExtractionResult
from jobprep.scraper.text import normalize_job_text

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_INPUT_MESSAGE = "Please provide a valid URL or paste the job text."

# DNS names (IDNA-encoded by httpx) or bracket-less IPv6 literals
_HOST_RE = re.compile(r"[A-Za-z0-9_.-]+|[0-9A-Fa-f:.]*:[0-9A-Fa-f:.]*")


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class AnalyzeRequest(BaseModel):
    url: Optional[str] = None
    text: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_valid_http_url(value: str | None) -> bool:
    """Return ``True`` for absolute ``http``/``https`` URLs with a well-formed host."""
    if not value:
        return False
    try:
        url = httpx.URL(value.strip())
    except (httpx.InvalidURL, TypeError, ValueError):
        return False
    if url.scheme not in ("http", "https"):
        return False
    # httpx percent-encodes stray characters in the host instead of rejecting them
    host = url.raw_host.decode("ascii", errors="replace")
    return bool(_HOST_RE.fullmatch(host))


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/analyze")
async def analyze_endpoint(body: AnalyzeRequest, request: Request) -> Any:
    """Extract job text from pasted text or a URL and generate questions.

    Returns ``{"analysis": {...}, "parse": {"method", "length"}}``.
    """
    pasted = body.text or ""
    url = (body.url or "").strip()

    try:
        if len(pasted.strip()) >= settings.min_text_length:
            parsed = ExtractionResult(
                text=normalize_job_text(pasted), method=ExtractionMethod.PASTED
            )
        elif is_valid_http_url(url):
            await request.app.state.links.add(url)
            parsed = await fetch_job_text(url)
        else:
            return _error(400, INVALID_INPUT_MESSAGE)

        logger.info("Job text ready: %d chars via %s", parsed.length, parsed.method.value)
        analysis = await analyze_job_text(parsed.text)
    except AnalysisTimeout as exc:
        return _error(504, str(exc))
    except (FetchError, AnalysisError) as exc:
        logger.warning("Analysis request failed: %s", exc)
        return _error(500, str(exc))
    except Exception as exc:
        logger.exception("Unexpected error while analysing job posting")
        return _error(500, str(exc) or "Server error")

    return {"analysis": analysis, "parse": parsed.to_parse_meta()}
