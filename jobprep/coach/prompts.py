"""Prompt text and the strict JSON schema for the question generator."""

from __future__ import annotations

from typing import Any

ROLE_LEVELS = ["junior", "mid", "senior", "lead", "staff", "director", "unknown"]
ROLE_TYPES = ["ic", "manager", "mixed", "unknown"]
DOMAINS = ["b2b", "consumer", "enterprise", "saas", "unknown"]

SYSTEM_PROMPT = """\
You are an interview coach for product and UX/UI designers.
You receive the raw text of a design job posting.
Extract the role level (junior/mid/senior/lead/staff/director/unknown), role type (ic/manager/mixed/unknown), likely domain (b2b/consumer/enterprise/saas/unknown), and likely design focus.
Detect and return key signals (tags) from the posting.
Then generate 6-10 behavioral interview questions tailored to the role.
Questions must be behavioral (about past actions, decisions, tradeoffs, collaboration, ambiguity, impact).
Avoid generic or fluffy questions.
Write questions in English and in a specific, senior-friendly style ("Tell me about a time...", "Describe a project...", "Give an example...").
Questions must be evidence-anchored: each theme should explicitly reflect the detected signals.
If the posting suggests platform, B2B/SaaS, design systems, or enterprise scope, make questions reflect that.
Group questions by theme.
Output JSON only."""

SCHEMA_HINT = """\
Return a JSON object with keys:
- role_level: one of ["junior","mid","senior","lead","staff","director","unknown"]
- role_type: one of ["ic","manager","mixed","unknown"]
- domain: one of ["b2b","consumer","enterprise","saas","unknown"]
- focus: short string like "product design", "ux/ui", "design systems", "research-heavy", "growth", "enterprise", "consumer", etc.
- signals: array of 3-10 strings (keywords/tags extracted from the posting)
- themes: array of objects with keys:
  - theme: short label like "Strategy & Problem Framing", "End-to-End Execution", "Design Systems & Visual Language", "Collaboration & Influence", "Ambiguity & Tradeoffs", "Impact & Metrics"
  - questions: array of 1-3 strings
Total questions across all themes must be 6-10."""

ANALYSIS_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "role_level": {"type": "string", "enum": ROLE_LEVELS},
        "role_type": {"type": "string", "enum": ROLE_TYPES},
        "domain": {"type": "string", "enum": DOMAINS},
        "focus": {"type": "string"},
        "signals": {
            "type": "array",
            "minItems": 0,
            "maxItems": 10,
            "items": {"type": "string"},
        },
        "themes": {
            "type": "array",
            "minItems": 3,
            "maxItems": 8,
            "items": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "theme": {"type": "string"},
                    "questions": {
                        "type": "array",
                        "minItems": 1,
                        "maxItems": 3,
                        "items": {"type": "string"},
                    },
                },
                "required": ["theme", "questions"],
            },
        },
    },
    "required": ["role_level", "role_type", "domain", "focus", "signals", "themes"],
}

# OpenAI ``response_format`` wrapper around the schema above.
RESPONSE_FORMAT: dict[str, Any] = {
    "name": "design_role_questions",
    "schema": ANALYSIS_JSON_SCHEMA,
    "strict": True,
}


def build_instructions(
    seniority: str, focus: str, signals: list[str], domain: str, role_type: str
) -> str:
    """System instructions with the heuristic hints appended."""
    return (
        f"{SYSTEM_PROMPT}\n"
        f"Heuristic seniority hint from text (may be unknown): {seniority}. "
        "If the posting explicitly names a level, prioritize that.\n"
        f"Heuristic focus hint: {focus}.\n"
        f"Detected signals: {', '.join(signals) or 'none'}.\n"
        f"Detected domain: {domain}. Detected role type: {role_type}. "
        "Use these signals explicitly in the themes and questions."
    )


def build_user_prompt(job_text: str) -> str:
    return f"Job posting text (English):\n{job_text}\n\n{SCHEMA_HINT}"
