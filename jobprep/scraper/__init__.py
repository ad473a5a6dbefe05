"""Scraper package — job-page fetch & text extraction."""

from jobprep.scraper.extractor import parse_job_text
from jobprep.scraper.fetcher import FetchError, fetch_job_text
from jobprep.scraper.models import ExtractionMethod, ExtractionResult, RawDocument
from jobprep.scraper.text import normalize_job_text, strip_to_text

__all__ = [
    "fetch_job_text",
    "parse_job_text",
    "normalize_job_text",
    "strip_to_text",
    "FetchError",
    "ExtractionMethod",
    "ExtractionResult",
    "RawDocument",
]
