"""Read-only admin pages.

Routes
------
GET /admin/analytics    Total root-page visits.
GET /admin/links        Saved job links, newest first.
"""

from __future__ import annotations

from datetime import datetime
from html import escape

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from jobprep.store import AnalyticsCounter, SavedLink

router = APIRouter()

_BASE_CSS = """
      :root { color-scheme: dark; }
      body {
        margin: 0;
        font-family: "Helvetica Neue", Arial, sans-serif;
        background: #0f1115;
        color: #f5f7ff;
      }
"""

_ANALYTICS_CSS = """
      .wrap { min-height: 100vh; display: grid; place-items: center; padding: 32px; }
      .card {
        width: min(520px, 100%);
        background: #171a21;
        border-radius: 16px;
        padding: 28px;
        box-shadow: 0 18px 40px rgba(0, 0, 0, 0.45);
        border: 1px solid rgba(255, 255, 255, 0.08);
      }
      .label { font-size: 14px; text-transform: uppercase; letter-spacing: 0.16em; color: #9aa3b2; }
      .metric { font-size: 56px; font-weight: 700; margin: 8px 0 16px; }
      .updated { font-size: 14px; color: #9aa3b2; }
      .note { margin-top: 18px; font-size: 12px; color: #6f7785; }
"""

_LINKS_CSS = """
      .wrap { min-height: 100vh; padding: 32px; }
      h1 { margin: 0 0 18px; font-size: 22px; letter-spacing: 0.02em; }
      table {
        width: 100%;
        border-collapse: collapse;
        background: #171a21;
        border-radius: 12px;
        overflow: hidden;
        border: 1px solid rgba(255, 255, 255, 0.08);
      }
      th, td {
        text-align: left;
        padding: 14px 16px;
        border-bottom: 1px solid rgba(255, 255, 255, 0.06);
        font-size: 14px;
      }
      th { text-transform: uppercase; letter-spacing: 0.12em; color: #9aa3b2; font-size: 12px; }
      tr:last-child td { border-bottom: none; }
      a { color: #8cc7ff; word-break: break-all; }
      .empty {
        padding: 24px;
        color: #9aa3b2;
        background: #171a21;
        border-radius: 12px;
        border: 1px solid rgba(255, 255, 255, 0.08);
      }
"""


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def format_timestamp(value: str | None, default: str = "Never") -> str:
    """Render an ISO-8601 timestamp as ``M/D/YYYY, h:mm:ss AM``."""
    if not value:
        return default
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return escape(value)
    hour = moment.hour % 12 or 12
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} "
        f"{'AM' if moment.hour < 12 else 'PM'}"
    )


def _page(title: str, css: str, body: str) -> str:
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width,initial-scale=1" />
    <title>{title}</title>
    <style>{_BASE_CSS}{css}    </style>
  </head>
  <body>
{body}
  </body>
</html>"""


def render_analytics_page(counter: AnalyticsCounter) -> str:
    body = f"""    <div class="wrap">
      <div class="card">
        <div class="label">Total visits</div>
        <div class="metric">{counter.totalVisits}</div>
        <div class="updated">Last updated: {format_timestamp(counter.lastUpdated)}</div>
        <div class="note">Counts visits to "/" and "/index.html".</div>
      </div>
    </div>"""
    return _page("Analytics", _ANALYTICS_CSS, body)


def render_links_page(links: list[SavedLink]) -> str:
    rows = "".join(
        f"""
          <tr>
            <td>{format_timestamp(link.createdAt, default="—")}</td>
            <td>{escape(link.title or "Untitled")}</td>
            <td><a href="{escape(link.url)}" target="_blank" rel="noopener noreferrer">{escape(link.url)}</a></td>
          </tr>"""
        for link in reversed(links)
    )
    if rows:
        content = f"""      <table>
        <thead>
          <tr><th>Date</th><th>Title</th><th>URL</th></tr>
        </thead>
        <tbody>{rows}
        </tbody>
      </table>"""
    else:
        content = '      <div class="empty">No links saved yet.</div>'

    body = f"""    <div class="wrap">
      <h1>Saved Job Links ({len(links)})</h1>
{content}
    </div>"""
    return _page("Job Links", _LINKS_CSS, body)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/analytics", response_class=HTMLResponse)
async def analytics_page(request: Request) -> str:
    return render_analytics_page(request.app.state.analytics.snapshot())


@router.get("/links", response_class=HTMLResponse)
async def links_page(request: Request) -> str:
    return render_links_page(request.app.state.links.all())
