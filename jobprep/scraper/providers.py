"""Per-provider extractors for applicant-tracking-system (ATS) pages.

Each known ATS renders job pages with its own inspectable data shape, so
each gets a dedicated parser.  Dispatch is keyed on the hostname of the
source URL; providers are mutually exclusive and there is no fallback from
one provider's parser to another's.

Supported providers
-------------------
``ashby``       ``ashbyhq.com`` — Next.js page data in ``#__NEXT_DATA__``.
``lever``       ``lever.co`` — ``.posting`` DOM, else ``window.__lever__``.
``greenhouse``  ``greenhouse.io`` — ``#content`` / ``.content`` / ``main``.
``workday``     ``myworkdayjobs.com`` or any ``*workday*`` host —
                ``jobPostingInfo`` JSON, else the whole page.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from jobprep.scraper.jsonld import safe_json_loads, script_text
from jobprep.scraper.models import ExtractionMethod, ExtractionResult
from jobprep.scraper.text import normalize_job_text, strip_to_text

logger = logging.getLogger(__name__)

_LEVER_STATE_RE = re.compile(r"window\.__lever__\s*=\s*(\{[\s\S]*?\});")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _dig(data: Any, *path: str) -> Any:
    """Walk nested dicts along *path*; ``None`` as soon as a key is missing."""
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _first(data: Any, *paths: tuple[str, ...]) -> Any:
    """Return the first truthy value found along any of *paths*."""
    for path in paths:
        value = _dig(data, *path)
        if value:
            return value
    return None


def hostname_of(url: str | None) -> str:
    if not url:
        return ""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


# ---------------------------------------------------------------------------
# Provider parsers
# ---------------------------------------------------------------------------

def extract_from_ashby(soup: BeautifulSoup, html: str) -> Optional[str]:
    script = soup.find("script", id="__NEXT_DATA__")
    if script is None:
        return None
    page = safe_json_loads(script_text(script))
    job = _first(
        page,
        ("props", "pageProps", "job"),
        ("props", "pageProps", "posting"),
        ("props", "pageProps", "data", "job"),
    )
    description = _first(job, ("descriptionHtml",), ("description",), ("descriptionHTML",))
    if not description:
        return None
    return strip_to_text(str(description)) or None


def extract_from_lever(soup: BeautifulSoup, html: str) -> Optional[str]:
    posting = soup.select_one(".posting") or soup.select_one(".posting-page")
    if posting is not None:
        return normalize_job_text(posting.get_text(" ")) or None

    match = _LEVER_STATE_RE.search(html)
    if not match:
        return None
    state = safe_json_loads(match.group(1))
    text = _first(state, ("posting", "text"), ("posting", "description"))
    return normalize_job_text(str(text)) if text else None


def extract_from_greenhouse(soup: BeautifulSoup, html: str) -> Optional[str]:
    for selector in ("#content", ".content", "main"):
        content = soup.select_one(selector)
        if content is not None:
            return normalize_job_text(content.get_text(" ")) or None
    return None


def extract_from_workday(soup: BeautifulSoup, html: str) -> Optional[str]:
    for script in soup.find_all("script", attrs={"type": "application/json"}):
        raw = script_text(script)
        if "jobPostingInfo" not in raw:
            continue
        data = safe_json_loads(raw)
        job = _first(data, ("jobPostingInfo",), ("data", "jobPostingInfo"))
        description = _first(job, ("jobDescription",), ("jobDescriptionHtml",))
        if description:
            return strip_to_text(str(description)) or None
        break

    logger.debug("No Workday jobPostingInfo found; stripping whole page")
    return strip_to_text(html) or None


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

ProviderParser = Callable[[BeautifulSoup, str], Optional[str]]


class Provider(Enum):
    """Known ATS providers, each bound to hostname markers and a parser."""

    ASHBY = ("ashby", ("ashbyhq.com",))
    LEVER = ("lever", ("lever.co",))
    GREENHOUSE = ("greenhouse", ("greenhouse.io",))
    WORKDAY = ("workday", ("myworkdayjobs.com", "workday"))
    UNKNOWN = ("unknown", ())

    def __init__(self, label: str, host_markers: tuple[str, ...]) -> None:
        self.label = label
        self.host_markers = host_markers

    def matches(self, hostname: str) -> bool:
        return any(marker in hostname for marker in self.host_markers)

    @property
    def method(self) -> Optional[ExtractionMethod]:
        return _METHODS.get(self)

    @property
    def parser(self) -> Optional[ProviderParser]:
        return _PARSERS.get(self)


_PARSERS: dict[Provider, ProviderParser] = {
    Provider.ASHBY: extract_from_ashby,
    Provider.LEVER: extract_from_lever,
    Provider.GREENHOUSE: extract_from_greenhouse,
    Provider.WORKDAY: extract_from_workday,
}

_METHODS: dict[Provider, ExtractionMethod] = {
    Provider.ASHBY: ExtractionMethod.ATS_ASHBY,
    Provider.LEVER: ExtractionMethod.ATS_LEVER,
    Provider.GREENHOUSE: ExtractionMethod.ATS_GREENHOUSE,
    Provider.WORKDAY: ExtractionMethod.ATS_WORKDAY,
}


def detect_provider(url: str | None) -> Provider:
    """Map *url* to its ATS provider (``Provider.UNKNOWN`` when none match).

    Checked in the canonical order Ashby → Lever → Greenhouse → Workday.
    """
    hostname = hostname_of(url)
    if hostname:
        for provider in (Provider.ASHBY, Provider.LEVER, Provider.GREENHOUSE, Provider.WORKDAY):
            if provider.matches(hostname):
                return provider
    return Provider.UNKNOWN


def extract_from_provider(
    soup: BeautifulSoup, html: str, url: str | None
) -> Optional[ExtractionResult]:
    """Run the matching provider's parser against the page.

    Returns ``None`` when the hostname is not a known ATS or the provider's
    parser recovers nothing.
    """
    provider = detect_provider(url)
    if provider is Provider.UNKNOWN:
        return None

    text = provider.parser(soup, html)
    if not text:
        logger.debug("%s parser found no job text on %s", provider.label, url)
        return None
    return ExtractionResult(text=text, method=provider.method)
