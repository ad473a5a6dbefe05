"""Interview-coach package — heuristics and the generative step."""

from jobprep.coach.analyzer import AnalysisError, AnalysisTimeout, analyze_job_text
from jobprep.coach.heuristics import extract_signals, infer_focus, infer_seniority

__all__ = [
    "analyze_job_text",
    "AnalysisError",
    "AnalysisTimeout",
    "extract_signals",
    "infer_focus",
    "infer_seniority",
]
