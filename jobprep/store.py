"""Flat-file persistence for the visit counter and the saved-link list.

Both stores keep their state in memory, load it once at startup (a missing
or corrupt file means "start from zero"; a malformed link entry is skipped),
and rewrite the whole JSON file on every mutation.  Each read-modify-write
runs under an ``asyncio.Lock`` with the file write in a worker thread.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _read_json(path: Path) -> Any:
    """Return the decoded contents of *path*, or ``None`` if unreadable."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable %s: %s", path, exc)
        return None


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# Visit counter
# ---------------------------------------------------------------------------

@dataclass
class AnalyticsCounter:
    totalVisits: int = 0
    lastUpdated: Optional[str] = None


class AnalyticsStore:
    """Monotonic counter of visits to the root page."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.counter = AnalyticsCounter()
        self._lock = asyncio.Lock()

    def load(self) -> "AnalyticsStore":
        data = _read_json(self.path)
        total = data.get("totalVisits") if isinstance(data, dict) else None
        if isinstance(total, bool):
            total = None
        if isinstance(total, float) and total.is_integer():
            total = int(total)
        if isinstance(total, int):
            self.counter = AnalyticsCounter(
                totalVisits=total, lastUpdated=data.get("lastUpdated") or None
            )
        return self

    async def record_visit(self) -> AnalyticsCounter:
        """Increment the counter and persist it."""
        async with self._lock:
            self.counter.totalVisits += 1
            self.counter.lastUpdated = _utc_now_iso()
            await asyncio.to_thread(_write_json, self.path, asdict(self.counter))
            return AnalyticsCounter(**asdict(self.counter))

    def snapshot(self) -> AnalyticsCounter:
        return AnalyticsCounter(**asdict(self.counter))


# ---------------------------------------------------------------------------
# Saved links
# ---------------------------------------------------------------------------

@dataclass
class SavedLink:
    title: str
    url: str
    createdAt: str
    createdAtMs: int


class LinkStore:
    """Append-only list of job URLs submitted for analysis."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.links: list[SavedLink] = []
        self._lock = asyncio.Lock()

    def load(self) -> "LinkStore":
        data = _read_json(self.path)
        if not isinstance(data, list):
            return self

        links: list[SavedLink] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                links.append(
                    SavedLink(
                        title=str(item.get("title") or ""),
                        url=str(item.get("url") or ""),
                        createdAt=str(item.get("createdAt") or ""),
                        createdAtMs=int(item.get("createdAtMs") or 0),
                    )
                )
            except (TypeError, ValueError, OverflowError) as exc:
                logger.warning("Skipping malformed saved link %r: %s", item, exc)
        self.links = links
        return self

    async def add(self, url: str) -> SavedLink:
        """Append *url* (titled by its hostname) and persist the list."""
        link = SavedLink(
            title=urlparse(url).hostname or url,
            url=url,
            createdAt=_utc_now_iso(),
            createdAtMs=int(time.time() * 1000),
        )
        async with self._lock:
            self.links.append(link)
            payload = [asdict(item) for item in self.links]
            await asyncio.to_thread(_write_json, self.path, payload)
        return link

    def all(self) -> list[SavedLink]:
        return list(self.links)
