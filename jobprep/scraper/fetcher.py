"""Fetch-with-fallback pipeline: URL → normalised job text.

Three sequential attempts, each accepted only when the final normalised text
reaches ``settings.min_text_length`` characters:

    1. ``direct``       GET the page with browser-like headers and run the
                        extraction cascade on the HTML.
    2. ``jina``         GET the page through the reader proxy, which renders
                        it server-side and returns readable text.
    3. ``jina-double``  Proxy-of-proxy, for origins that block the proxy
                        itself.  Failure here is fatal.

Network errors and non-2xx responses on steps 1–2 are logged and absorbed.
There is no backoff and no concurrency between attempts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from jobprep.config import settings
from jobprep.scraper.extractor import is_acceptable, parse_job_text
from jobprep.scraper.models import ExtractionMethod, ExtractionResult
from jobprep.scraper.text import normalize_job_text

logger = logging.getLogger(__name__)

_BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
}


class FetchError(RuntimeError):
    """Raised when every fetch attempt failed to produce enough job text.

    ``status_code`` is the status of the *direct* fetch (``None`` if that
    request never got a response).
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Proxy URL construction
# ---------------------------------------------------------------------------

def reader_url(url: str, base: str | None = None) -> str:
    """Return *url* routed through the reader proxy, scheme preserved."""
    base = (base or settings.proxy_base_url).rstrip("/")
    return f"{base}/{url}"


def double_reader_url(url: str) -> str:
    """Return *url* routed through the reader proxy twice.

    The inner hop uses plain ``http`` so the outer proxy fetches it as an
    ordinary origin.
    """
    parts = urlsplit(settings.proxy_base_url)
    inner_base = urlunsplit(("http", parts.netloc, parts.path, "", ""))
    return reader_url(reader_url(url, base=inner_base))


# ---------------------------------------------------------------------------
# Attempts
# ---------------------------------------------------------------------------

async def _get(client: httpx.AsyncClient, url: str, **kwargs) -> Optional[httpx.Response]:
    """GET *url*; return ``None`` on a transport-level failure."""
    try:
        return await client.get(url, **kwargs)
    except httpx.HTTPError as exc:
        logger.warning("GET %s failed: %s", url, exc)
        return None


def _accept(text: str, method: ExtractionMethod) -> Optional[ExtractionResult]:
    text = text[: settings.max_text_length]
    return ExtractionResult(text=text, method=method) if is_acceptable(text) else None


async def _try_direct(
    client: httpx.AsyncClient, url: str
) -> tuple[Optional[int], Optional[ExtractionResult]]:
    response = await _get(client, url, headers=_BROWSER_HEADERS)
    if response is None:
        return None, None
    if not response.is_success:
        logger.info("Direct fetch of %s returned %d", url, response.status_code)
        return response.status_code, None

    # The cascade is CPU-bound; keep it off the event loop.
    parsed = await asyncio.to_thread(
        parse_job_text, response.text, url, ExtractionMethod.DIRECT
    )
    return response.status_code, _accept(parsed.text, parsed.method)


async def _try_proxy(
    client: httpx.AsyncClient, proxied: str, method: ExtractionMethod
) -> Optional[ExtractionResult]:
    response = await _get(client, proxied)
    if response is None or not response.is_success:
        return None
    return _accept(normalize_job_text(response.text), method)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def fetch_job_text(url: str) -> ExtractionResult:
    """Fetch *url* and return its job-description text.

    Raises:
        FetchError: If the double-hop proxy request fails (message carries
            the direct fetch's status) or no attempt yields enough text.
    """
    async with httpx.AsyncClient(
        timeout=settings.request_timeout,
        follow_redirects=True,
    ) as client:
        status, result = await _try_direct(client, url)
        if result is not None:
            return result

        logger.warning("Direct fetch of %s insufficient, trying reader proxy", url)
        result = await _try_proxy(client, reader_url(url), ExtractionMethod.JINA)
        if result is not None:
            return result

        logger.warning("Reader proxy insufficient for %s, trying double hop", url)
        response = await _get(client, double_reader_url(url))

    if response is None or not response.is_success:
        message = "Failed to fetch page."
        if status is not None:
            message = f"{message} Status {status}"
        raise FetchError(message, status_code=status)

    result = _accept(normalize_job_text(response.text), ExtractionMethod.JINA_DOUBLE)
    if result is None:
        raise FetchError("Not enough readable text found on the page.", status_code=status)
    return result
