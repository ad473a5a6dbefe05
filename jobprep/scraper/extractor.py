"""Extraction orchestrator: turns raw job-page HTML into an :class:`ExtractionResult`.

Extractors run in a fixed confidence order against one parsed document and
the first result that clears the minimum-length bar wins:

    1. JSON-LD ``JobPosting``         (``jsonld``)
    2. ATS provider parser            (``ats-*``)
    3. trafilatura main-content pass  (``readability``)
    4. meta description               (``meta``)
    5. whole-page tag stripping       (caller-supplied label)

Step 5 is unconditional; its text may be shorter than the bar and the caller
decides whether that is acceptable.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import trafilatura
from bs4 import BeautifulSoup

from jobprep.config import settings
from jobprep.scraper.jsonld import extract_json_ld
from jobprep.scraper.models import (
    ExtractionMethod,
    ExtractionResult,
    ParsedDocument,
    RawDocument,
)
from jobprep.scraper.providers import extract_from_provider
from jobprep.scraper.text import normalize_job_text, strip_to_text

logger = logging.getLogger(__name__)

_META_SELECTORS = (
    'meta[property="og:description"]',
    'meta[name="twitter:description"]',
    'meta[name="description"]',
)


# ---------------------------------------------------------------------------
# Single-purpose extractors
# ---------------------------------------------------------------------------

def extract_readable(html: str, url: str | None) -> Optional[str]:
    """Return the page's main content as normalised text, or ``None``.

    Uses ``trafilatura`` (density-based block scoring) with *url* so that
    relative references resolve against the original page.
    """
    if not html:
        return None
    text: str | None = trafilatura.extract(
        html,
        url=url,
        include_comments=False,
        include_images=False,
        include_links=False,
        include_tables=True,
        favor_recall=True,
    )
    if not text:
        return None
    return normalize_job_text(text) or None


def extract_meta_description(soup: BeautifulSoup) -> Optional[str]:
    """Return og/twitter/plain meta description content, in that priority."""
    for selector in _META_SELECTORS:
        meta = soup.select_one(selector)
        if meta is not None:
            content = meta.get("content")
            return normalize_job_text(content) if content else None
    return None


# ---------------------------------------------------------------------------
# Cascade steps — each returns a candidate result or None
# ---------------------------------------------------------------------------

Step = Callable[[ParsedDocument], Optional[ExtractionResult]]


def _jsonld_step(doc: ParsedDocument) -> Optional[ExtractionResult]:
    text = extract_json_ld(doc.soup)
    return ExtractionResult(text, ExtractionMethod.JSONLD) if text else None


def _provider_step(doc: ParsedDocument) -> Optional[ExtractionResult]:
    return extract_from_provider(doc.soup, doc.html, doc.url)


def _readability_step(doc: ParsedDocument) -> Optional[ExtractionResult]:
    text = extract_readable(doc.html, doc.url)
    return ExtractionResult(text, ExtractionMethod.READABILITY) if text else None


def _meta_step(doc: ParsedDocument) -> Optional[ExtractionResult]:
    text = extract_meta_description(doc.soup)
    return ExtractionResult(text, ExtractionMethod.META) if text else None


STEPS: tuple[Step, ...] = (_jsonld_step, _provider_step, _readability_step, _meta_step)


def is_acceptable(text: str | None) -> bool:
    """Return ``True`` when *text* meets the minimum-length bar."""
    return bool(text) and len(text) >= settings.min_text_length


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_job_text(
    html: str,
    url: str | None = None,
    source_label: ExtractionMethod = ExtractionMethod.DIRECT,
) -> ExtractionResult:
    """Extract job-description text from *html*.

    Args:
        html: Raw page HTML.
        url: Page URL; drives ATS dispatch and readability link resolution.
        source_label: Method recorded when only the whole-page fallback
            produced text.

    Returns:
        The first cascade result with at least ``settings.min_text_length``
        characters, else the tag-stripped page text (possibly short or empty).
    """
    doc = ParsedDocument.from_raw(RawDocument(html=html or "", url=url))

    for step in STEPS:
        result = step(doc)
        if result is not None and is_acceptable(result.text):
            logger.debug("Extracted %d chars via %s", result.length, result.method.value)
            return result
        logger.debug(
            "%s yielded %d chars, moving on",
            step.__name__.strip("_"),
            result.length if result else 0,
        )

    return ExtractionResult(text=strip_to_text(html), method=source_label)
