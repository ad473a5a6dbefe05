"""Data models for the job-text extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bs4 import BeautifulSoup


class ExtractionMethod(str, Enum):
    """Which step of the pipeline produced a piece of job text."""

    JSONLD = "jsonld"
    ATS_ASHBY = "ats-ashby"
    ATS_LEVER = "ats-lever"
    ATS_GREENHOUSE = "ats-greenhouse"
    ATS_WORKDAY = "ats-workday"
    READABILITY = "readability"
    META = "meta"
    DIRECT = "direct"
    JINA = "jina"
    JINA_DOUBLE = "jina-double"
    PASTED = "pasted"


@dataclass
class RawDocument:
    """An HTML blob and the URL it came from (``None`` for pasted text)."""

    html: str
    url: Optional[str] = None


@dataclass
class ParsedDocument:
    """A :class:`RawDocument` plus its queryable DOM.

    Built once per extraction attempt and shared by every extractor in the
    cascade; never reused across attempts.
    """

    raw: RawDocument
    soup: BeautifulSoup

    @classmethod
    def from_raw(cls, raw: RawDocument) -> "ParsedDocument":
        return cls(raw=raw, soup=BeautifulSoup(raw.html or "", "lxml"))

    @property
    def html(self) -> str:
        return self.raw.html

    @property
    def url(self) -> Optional[str]:
        return self.raw.url


@dataclass
class ExtractionResult:
    """Normalised job text plus the method that recovered it."""

    text: str
    method: ExtractionMethod

    @property
    def length(self) -> int:
        return len(self.text)

    def to_parse_meta(self) -> dict[str, object]:
        """Return the ``{"method", "length"}`` summary sent to API clients."""
        return {"method": self.method.value, "length": self.length}
