"""Keyword heuristics that classify a job posting without the LLM.

The results are passed to the model as hints and later backfill any field
the model leaves as ``"unknown"`` or empty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

MAX_SIGNALS = 10

_SENIORITY_PATTERNS = [
    ("director", r"\b(director|vp|head of design|design director)\b"),
    ("staff", r"\b(staff|principal|lead)\b"),
    ("senior", r"\b(senior|sr\.?|senior-level)\b"),
    ("mid", r"\b(mid|mid-level|intermediate)\b"),
    ("junior", r"\b(junior|jr\.?|entry[- ]level)\b"),
]

# Tag order here is the order tags are reported in.
_SIGNAL_PATTERNS = [
    ("b2b", r"\b(b2b|business[- ]to[- ]business)\b"),
    ("enterprise", r"\b(enterprise|large[- ]scale|regulated|compliance)\b"),
    ("consumer", r"\b(consumer|b2c|consumer[- ]facing)\b"),
    ("saas", r"\b(saas|subscription)\b"),
    ("mobile", r"\b(mobile|ios|android)\b"),
    ("web", r"\b(web|responsive|dashboard)\b"),
    ("multi-platform", r"\b(multi[- ]platform|cross[- ]platform)\b"),
    ("design systems", r"\b(design system|design systems|component library)\b"),
    ("research", r"\b(user research|ux research|research)\b"),
    ("metrics & experimentation", r"\b(metrics|kpi|conversion|experimentation|ab test|a/b)\b"),
    ("accessibility", r"\b(accessibility|a11y|wcag)\b"),
    ("stakeholder management", r"\b(stakeholder|stakeholders)\b"),
    ("cross-functional", r"\b(cross[- ]functional|product manager|engineering|marketing|data)\b"),
    ("leadership", r"\b(leadership|influence|strategy)\b"),
]

_DOMAIN_PRIORITY = ("b2b", "enterprise", "saas", "consumer")

_MANAGER_RE = re.compile(
    r"\b(manager|management|people manager|hiring|mentorship|mentoring|performance reviews)\b"
)
_IC_RE = re.compile(r"\b(individual contributor|ic)\b")

_FOCUS_PATTERNS = [
    ("brand & visual design", r"\b(brand|visual identity|graphic|marketing design|campaign)\b"),
    ("design systems", r"\b(design system|design systems|component library)\b"),
    ("research-heavy", r"\b(user research|ux research|research)\b"),
    ("growth", r"\b(growth|conversion|activation|retention|funnel)\b"),
    ("product design", r"\b(product designer|product design|ux/ui|ux|ui)\b"),
]
DEFAULT_FOCUS = "product design"


@dataclass
class Signals:
    """Tags, domain and role type detected in a posting."""

    signals: list[str] = field(default_factory=list)
    domain: str = "unknown"
    role_type: str = "unknown"


def _search(pattern: str, text: str) -> bool:
    return re.search(pattern, text) is not None


def infer_seniority(job_text: str | None) -> str:
    """Return the most senior level mentioned, or ``"unknown"``."""
    text = (job_text or "").lower()
    for level, pattern in _SENIORITY_PATTERNS:
        if _search(pattern, text):
            return level
    return "unknown"


def extract_signals(job_text: str | None) -> Signals:
    text = (job_text or "").lower()
    tags = [tag for tag, pattern in _SIGNAL_PATTERNS if _search(pattern, text)]

    domain = next((d for d in _DOMAIN_PRIORITY if d in tags), "unknown")

    manager = _MANAGER_RE.search(text) is not None
    ic = _IC_RE.search(text) is not None
    if manager and ic:
        role_type = "mixed"
    elif manager:
        role_type = "manager"
    elif ic:
        role_type = "ic"
    else:
        role_type = "unknown"

    return Signals(signals=tags[:MAX_SIGNALS], domain=domain, role_type=role_type)


def infer_focus(job_text: str | None) -> str:
    text = (job_text or "").lower()
    for focus, pattern in _FOCUS_PATTERNS:
        if _search(pattern, text):
            return focus
    return DEFAULT_FOCUS


def merge_signals(*groups: list[str], limit: int = MAX_SIGNALS) -> list[str]:
    """Concatenate tag lists, dropping empties and duplicates, keeping order."""
    merged: list[str] = []
    for group in groups:
        for tag in group or []:
            if tag and tag not in merged:
                merged.append(tag)
    return merged[:limit]
