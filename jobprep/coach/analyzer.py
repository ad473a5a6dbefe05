"""Generative step: job text → role classification + themed interview questions.

``analyze_job_text`` sends the job text, the heuristic hints and a strict
JSON schema to the configured chat model, validates the structured reply,
then backfills any field the model left as ``"unknown"`` from the keyword
heuristics and merges the detected tags into ``signals``.

Chat providers
--------------
``openai`` (default)
    ``ChatOpenAI`` with ``json_schema`` structured output.
    Requires ``OPENAI_API_KEY``.

``ollama``
    ``ChatOllama`` against ``OLLAMA_BASE_URL``.

The call is bounded by ``settings.llm_timeout``; a timeout is fatal for the
request and surfaces as :class:`AnalysisTimeout`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Literal

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, ValidationError

from jobprep.coach.heuristics import (
    extract_signals,
    infer_focus,
    infer_seniority,
    merge_signals,
)
from jobprep.coach.prompts import (
    ANALYSIS_JSON_SCHEMA,
    RESPONSE_FORMAT,
    build_instructions,
    build_user_prompt,
)
from jobprep.config import settings

logger = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """The generative step failed or returned unusable output."""


class AnalysisTimeout(AnalysisError):
    """The generative step did not answer within ``settings.llm_timeout``."""


# ---------------------------------------------------------------------------
# Output schema
# ---------------------------------------------------------------------------

class Theme(BaseModel):
    theme: str
    questions: list[str]


class Analysis(BaseModel):
    role_level: Literal["junior", "mid", "senior", "lead", "staff", "director", "unknown"]
    role_type: Literal["ic", "manager", "mixed", "unknown"]
    domain: Literal["b2b", "consumer", "enterprise", "saas", "unknown"]
    focus: str = ""
    signals: list[str] = []
    themes: list[Theme]


# ---------------------------------------------------------------------------
# LLM helper
# ---------------------------------------------------------------------------

def _get_llm() -> Any:
    """Return a structured-output LangChain chat model based on ``settings``.

    Raises:
        AnalysisError: If the OpenAI provider is selected without an API key.
    """
    if settings.llm_provider == "ollama":
        from langchain_ollama import ChatOllama

        llm = ChatOllama(
            model=settings.ollama_chat_model,
            base_url=settings.ollama_base_url,
            temperature=0.7,
        )
        return llm.with_structured_output(ANALYSIS_JSON_SCHEMA, method="json_schema")

    if not settings.openai_api_key:
        raise AnalysisError("Missing OPENAI_API_KEY in environment.")

    from langchain_openai import ChatOpenAI

    llm = ChatOpenAI(
        model=settings.openai_chat_model,
        api_key=settings.openai_api_key,
        temperature=0.7,
    )
    return llm.with_structured_output(RESPONSE_FORMAT, method="json_schema", strict=True)


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------

def _validate(raw: Any) -> Analysis:
    if not isinstance(raw, dict):
        raise AnalysisError("Model returned non-JSON output.")
    if not isinstance(raw.get("themes"), list):
        raise AnalysisError("Model JSON missing themes array.")
    try:
        return Analysis.model_validate(raw)
    except ValidationError as exc:
        raise AnalysisError(f"Model JSON does not match the schema: {exc}") from exc


def backfill(analysis: Analysis, job_text: str) -> dict[str, Any]:
    """Fill ``unknown``/empty fields from the keyword heuristics."""
    level = infer_seniority(job_text)
    detected = extract_signals(job_text)
    focus = infer_focus(job_text)

    final = analysis.model_copy()
    if final.role_level == "unknown" and level != "unknown":
        final.role_level = level
    if final.role_type == "unknown" and detected.role_type != "unknown":
        final.role_type = detected.role_type
    if final.domain == "unknown" and detected.domain != "unknown":
        final.domain = detected.domain
    if final.focus.strip().lower() in ("", "unknown"):
        final.focus = focus
    final.signals = merge_signals(final.signals, detected.signals)
    return final.model_dump()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def analyze_job_text(job_text: str) -> dict[str, Any]:
    """Return the structured interview-prep analysis for *job_text*.

    Returns:
        A dict with ``role_level``, ``role_type``, ``domain``, ``focus``,
        ``signals`` and ``themes`` (``[{"theme", "questions"}]``).

    Raises:
        AnalysisTimeout: If the model call exceeds ``settings.llm_timeout``.
        AnalysisError: On a missing credential, an upstream failure, or
            output that does not match the schema.
    """
    detected = extract_signals(job_text)
    instructions = build_instructions(
        seniority=infer_seniority(job_text),
        focus=infer_focus(job_text),
        signals=detected.signals,
        domain=detected.domain,
        role_type=detected.role_type,
    )
    messages = [
        SystemMessage(content=instructions),
        HumanMessage(content=build_user_prompt(job_text)),
    ]

    llm = _get_llm()
    try:
        raw = await asyncio.wait_for(llm.ainvoke(messages), timeout=settings.llm_timeout)
    except asyncio.TimeoutError as exc:
        raise AnalysisTimeout(
            f"Model did not respond within {settings.llm_timeout:.0f}s."
        ) from exc
    except AnalysisError:
        raise
    except Exception as exc:
        logger.error("Model call failed: %s", exc)
        raise AnalysisError(f"Model error: {exc}") from exc

    analysis = _validate(raw)
    logger.info(
        "Generated %d question(s) across %d theme(s)",
        sum(len(t.questions) for t in analysis.themes),
        len(analysis.themes),
    )
    return backfill(analysis, job_text)
