"""JSON-LD extractor.

Recovers job text from schema.org ``JobPosting`` structured data embedded in
``<script type="application/ld+json">`` blocks.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from bs4 import BeautifulSoup, Tag

from jobprep.scraper.text import normalize_job_text, strip_to_text

logger = logging.getLogger(__name__)

# Concatenation order of the posting fields.
JOB_POSTING_FIELDS = (
    "title",
    "description",
    "responsibilities",
    "qualifications",
    "experienceRequirements",
    "skills",
)


def safe_json_loads(raw: str | None) -> Any:
    """Parse *raw* as JSON, returning ``None`` instead of raising."""
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError) as exc:
        logger.debug("Skipping unparseable JSON blob: %s", exc)
        return None


def script_text(script: Tag) -> str:
    """Return the raw source inside a ``<script>`` element."""
    return script.string or script.get_text() or ""


def _flatten(data: Any) -> list[dict]:
    """Flatten arrays and ``@graph`` containers into a list of objects."""
    if isinstance(data, list):
        items: list[dict] = []
        for entry in data:
            items.extend(_flatten(entry))
        return items
    if isinstance(data, dict):
        graph = data.get("@graph")
        if isinstance(graph, list):
            return _flatten(graph)
        return [data]
    return []


def _is_job_posting(item: dict) -> bool:
    item_type = item.get("@type")
    if isinstance(item_type, list):
        return "JobPosting" in item_type
    return item_type == "JobPosting"


def _field_to_text(value: Any) -> str:
    """Render one posting field as plain text."""
    if isinstance(value, dict):
        value = value.get("description") or value.get("name") or ""
    elif isinstance(value, list):
        value = ", ".join(_field_to_text(v) for v in value if v)
    text = str(value) if value else ""
    return strip_to_text(text) if "<" in text else text


def find_job_posting(soup: BeautifulSoup) -> Optional[dict]:
    """Return the first ``JobPosting`` object declared in *soup*, if any."""
    candidates: list[dict] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        candidates.extend(_flatten(safe_json_loads(script_text(script))))

    for item in candidates:
        if _is_job_posting(item):
            return item
    return None


def extract_json_ld(soup: BeautifulSoup) -> Optional[str]:
    """Return normalised job text built from the page's JSON-LD JobPosting.

    Fields are joined with a blank line in :data:`JOB_POSTING_FIELDS` order;
    values containing markup are tag-stripped first.  Returns ``None`` when
    there is no JobPosting or it carries no usable text.
    """
    posting = find_job_posting(soup)
    if posting is None:
        return None

    parts = [_field_to_text(posting.get(name)) for name in JOB_POSTING_FIELDS]
    text = "\n\n".join(part for part in parts if part)
    return normalize_job_text(text) if text else None
