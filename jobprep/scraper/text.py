"""Text normalisation and regex-based HTML stripping.

Both helpers are pure string functions.  ``strip_to_text`` is a textual
heuristic, not an HTML parser: it only removes ``script``/``style``/
``noscript`` blocks and then every remaining tag.
"""

from __future__ import annotations

import re

from jobprep.config import settings

_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
    "&lt;": "<",
    "&gt;": ">",
}

_ENTITY_RE = re.compile("|".join(re.escape(e) for e in _ENTITIES))
_WHITESPACE_RE = re.compile(r"\s+")
_BLOCK_RES = [
    re.compile(rf"<{tag}[\s\S]*?</{tag}>", re.IGNORECASE)
    for tag in ("script", "style", "noscript")
]
_TAG_RE = re.compile(r"<[^>]+>")


def decode_entities(text: str) -> str:
    """Decode the fixed entity set, collapse whitespace and trim.

    Decoding repeats until nothing changes, so double-encoded input such as
    ``&amp;amp;`` ends up as ``&`` and a second call is always a no-op.
    """
    previous = None
    while previous != text:
        previous = text
        text = _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_job_text(text: str | None, limit: int | None = None) -> str:
    """Return *text* decoded, whitespace-collapsed and capped at *limit* chars.

    *limit* defaults to ``settings.max_text_length`` (12,000).  ``None`` or
    empty input yields ``""``.
    """
    cap = settings.max_text_length if limit is None else limit
    # rstrip: a cut can land right after a collapsed space
    return decode_entities(text or "")[:cap].rstrip()


def strip_to_text(html: str | None) -> str:
    """Remove script/style/noscript blocks and all tags, then normalise.

    Every removed region becomes a single space so adjacent words stay apart.
    """
    stripped = html or ""
    for pattern in _BLOCK_RES:
        stripped = pattern.sub(" ", stripped)
    stripped = _TAG_RE.sub(" ", stripped)
    return normalize_job_text(stripped)
