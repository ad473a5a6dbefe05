"""Job Prep CLI — entry-point for the extraction pipeline and the server.

Usage:
    python cli/main.py --help

Commands:
    extract     fetch a job URL and print the recovered text
    parse-file  run the extraction cascade on a saved HTML file
    analyze     full pipeline: job text → themed interview questions
    serve       run the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from jobprep.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from typing import Any, Optional

import typer

from jobprep.config import configure_logging, settings


app = typer.Typer(
    name="jobprep",
    help="Job posting text extraction and interview-prep CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log extraction steps."),
) -> None:
    configure_logging("DEBUG" if verbose else None)


def _fail(command: str, exc: Exception) -> None:
    typer.echo(f"[{command}] Error: {exc}", err=True)
    raise typer.Exit(1)


def _print_analysis(analysis: dict[str, Any]) -> None:
    typer.echo(f"Level   : {analysis.get('role_level', 'unknown')}")
    typer.echo(f"Type    : {analysis.get('role_type', 'unknown')}")
    typer.echo(f"Domain  : {analysis.get('domain', 'unknown')}")
    typer.echo(f"Focus   : {analysis.get('focus', '')}")
    typer.echo(f"Signals : {', '.join(analysis.get('signals', [])) or '(none)'}")
    number = 1
    for block in analysis.get("themes", []):
        typer.echo("")
        typer.echo(f"## {block['theme']}")
        for question in block["questions"]:
            typer.echo(f"  {number}. {question}")
            number += 1


# ---------------------------------------------------------------------------
# Extraction commands
# ---------------------------------------------------------------------------
@app.command("extract")
def extract(
    url: str = typer.Option(..., help="Job posting URL."),
) -> None:
    """Fetch a job URL (with proxy fallbacks) and print the extracted text."""
    from jobprep.scraper import FetchError, fetch_job_text

    typer.echo(f"[extract] Fetching {url!r} …")
    try:
        result = asyncio.run(fetch_job_text(url))
    except FetchError as exc:
        _fail("extract", exc)

    typer.echo(f"[extract] Method : {result.method.value}")
    typer.echo(f"[extract] Length : {result.length}")
    typer.echo("")
    typer.echo(result.text)


@app.command("parse-file")
def parse_file(
    path: Path = typer.Option(..., exists=True, dir_okay=False, help="Saved HTML file."),
    url: Optional[str] = typer.Option(None, help="Original page URL (enables ATS parsers)."),
) -> None:
    """Run the extraction cascade on a local HTML file."""
    from jobprep.scraper import parse_job_text

    html = path.read_text(encoding="utf-8", errors="replace")
    result = parse_job_text(html, url)
    typer.echo(f"[parse-file] Method : {result.method.value}")
    typer.echo(f"[parse-file] Length : {result.length}")
    if result.length < settings.min_text_length:
        typer.echo(f"[parse-file] Warning: below the {settings.min_text_length}-char minimum")
    typer.echo("")
    typer.echo(result.text)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------
@app.command("analyze")
def analyze(
    url: Optional[str] = typer.Option(None, help="Job posting URL."),
    text: Optional[str] = typer.Option(None, help="Pasted job description text."),
) -> None:
    """Generate themed behavioral interview questions for a job posting."""
    from jobprep.coach import AnalysisError, analyze_job_text
    from jobprep.scraper import ExtractionMethod, ExtractionResult, FetchError, fetch_job_text
    from jobprep.scraper.text import normalize_job_text

    async def _run() -> tuple[ExtractionResult, dict[str, Any]]:
        if text and len(text.strip()) >= settings.min_text_length:
            parsed = ExtractionResult(normalize_job_text(text), ExtractionMethod.PASTED)
        else:
            parsed = await fetch_job_text(url)
        return parsed, await analyze_job_text(parsed.text)

    if not url and not (text and len(text.strip()) >= settings.min_text_length):
        typer.echo(
            f"[analyze] Provide --url or at least {settings.min_text_length} chars of --text.",
            err=True,
        )
        raise typer.Exit(1)

    typer.echo("[analyze] Working … this can take 15-30 seconds.")
    try:
        parsed, analysis = asyncio.run(_run())
    except (FetchError, AnalysisError) as exc:
        _fail("analyze", exc)

    typer.echo(f"[analyze] Text via {parsed.method.value} ({parsed.length} chars)")
    typer.echo("")
    _print_analysis(analysis)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option(settings.host, help="Bind address."),
    port: int = typer.Option(settings.port, help="Bind port."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    typer.echo(f"[serve] Server running at http://{host}:{port}")
    uvicorn.run("jobprep.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
