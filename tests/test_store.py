"""Tests for the flat-file visit counter and saved-link list."""

from __future__ import annotations

import asyncio
import json
import threading
from pathlib import Path
from unittest.mock import patch

from jobprep import store as store_module
from jobprep.store import AnalyticsStore, LinkStore


# ---------------------------------------------------------------------------
# AnalyticsStore
# ---------------------------------------------------------------------------

class TestAnalyticsStore:
    def test_missing_file_starts_at_zero(self, tmp_path: Path) -> None:
        store = AnalyticsStore(tmp_path / "analytics.json").load()
        counter = store.snapshot()
        assert counter.totalVisits == 0
        assert counter.lastUpdated is None

    def test_corrupt_file_starts_at_zero(self, tmp_path: Path) -> None:
        path = tmp_path / "analytics.json"
        path.write_text("{not json", encoding="utf-8")
        assert AnalyticsStore(path).load().snapshot().totalVisits == 0

    def test_wrong_shape_starts_at_zero(self, tmp_path: Path) -> None:
        path = tmp_path / "analytics.json"
        path.write_text(json.dumps({"totalVisits": "12"}), encoding="utf-8")
        assert AnalyticsStore(path).load().snapshot().totalVisits == 0

    def test_whole_float_count_is_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "analytics.json"
        path.write_text(json.dumps({"totalVisits": 5.0}), encoding="utf-8")
        counter = AnalyticsStore(path).load().snapshot()
        assert counter.totalVisits == 5
        assert isinstance(counter.totalVisits, int)

    def test_fractional_or_boolean_count_starts_at_zero(self, tmp_path: Path) -> None:
        path = tmp_path / "analytics.json"
        path.write_text(json.dumps({"totalVisits": 5.5}), encoding="utf-8")
        assert AnalyticsStore(path).load().snapshot().totalVisits == 0
        path.write_text(json.dumps({"totalVisits": True}), encoding="utf-8")
        assert AnalyticsStore(path).load().snapshot().totalVisits == 0

    def test_loads_existing_counter(self, tmp_path: Path) -> None:
        path = tmp_path / "analytics.json"
        path.write_text(
            json.dumps({"totalVisits": 41, "lastUpdated": "2024-05-01T10:00:00.000Z"}),
            encoding="utf-8",
        )
        counter = AnalyticsStore(path).load().snapshot()
        assert counter.totalVisits == 41
        assert counter.lastUpdated == "2024-05-01T10:00:00.000Z"

    async def test_record_visit_increments_and_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "data" / "analytics.json"
        store = AnalyticsStore(path).load()

        await store.record_visit()
        counter = await store.record_visit()

        assert counter.totalVisits == 2
        assert counter.lastUpdated.endswith("Z")
        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert on_disk == {"totalVisits": 2, "lastUpdated": counter.lastUpdated}
        assert path.read_text(encoding="utf-8").endswith("}\n")

    async def test_writes_run_off_the_event_loop_thread(self, tmp_path: Path) -> None:
        write_threads: list[int] = []
        real_write = store_module._write_json

        def _recording_write(path: Path, payload: object) -> None:
            write_threads.append(threading.get_ident())
            real_write(path, payload)

        with patch("jobprep.store._write_json", side_effect=_recording_write):
            await AnalyticsStore(tmp_path / "analytics.json").load().record_visit()
            await LinkStore(tmp_path / "links.json").load().add("https://a.com")

        assert len(write_threads) == 2
        assert threading.get_ident() not in write_threads

    async def test_concurrent_visits_are_all_counted(self, tmp_path: Path) -> None:
        store = AnalyticsStore(tmp_path / "analytics.json").load()
        await asyncio.gather(*(store.record_visit() for _ in range(25)))
        assert store.snapshot().totalVisits == 25

    async def test_counter_survives_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "analytics.json"
        await AnalyticsStore(path).load().record_visit()
        assert AnalyticsStore(path).load().snapshot().totalVisits == 1


# ---------------------------------------------------------------------------
# LinkStore
# ---------------------------------------------------------------------------

class TestLinkStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert LinkStore(tmp_path / "links.json").load().all() == []

    def test_non_list_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "links.json"
        path.write_text(json.dumps({"url": "https://a.com"}), encoding="utf-8")
        assert LinkStore(path).load().all() == []

    def test_malformed_entry_is_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "links.json"
        path.write_text(
            json.dumps(
                [
                    {"title": "a.com", "url": "https://a.com", "createdAtMs": "not-a-number"},
                    {"title": "b.com", "url": "https://b.com", "createdAtMs": [1]},
                    "https://c.com",
                    {
                        "title": "d.com",
                        "url": "https://d.com",
                        "createdAt": "2024-05-01T10:00:00.000Z",
                        "createdAtMs": 1714557600000,
                    },
                ]
            ),
            encoding="utf-8",
        )
        links = LinkStore(path).load().all()
        assert [link.url for link in links] == ["https://d.com"]
        assert links[0].createdAtMs == 1714557600000

    async def test_add_records_hostname_and_timestamps(self, tmp_path: Path) -> None:
        store = LinkStore(tmp_path / "links.json").load()
        link = await store.add("https://jobs.lever.co/acme/123")

        assert link.title == "jobs.lever.co"
        assert link.url == "https://jobs.lever.co/acme/123"
        assert link.createdAt.endswith("Z")
        assert link.createdAtMs > 0

    async def test_add_appends_in_order_and_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "links.json"
        store = LinkStore(path).load()
        await store.add("https://a.com/1")
        await store.add("https://b.com/2")

        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert [item["url"] for item in on_disk] == ["https://a.com/1", "https://b.com/2"]
        assert set(on_disk[0]) == {"title", "url", "createdAt", "createdAtMs"}

        reloaded = LinkStore(path).load().all()
        assert [link.title for link in reloaded] == ["a.com", "b.com"]

    async def test_all_returns_a_copy(self, tmp_path: Path) -> None:
        store = LinkStore(tmp_path / "links.json").load()
        await store.add("https://a.com")
        store.all().clear()
        assert len(store.all()) == 1
