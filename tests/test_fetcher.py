"""Tests for the fetch-with-fallback pipeline.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.  Direct fetches are matched by exact URL; every reader-proxy
  request goes through one ``r.jina.ai`` route whose side effect tells the
  single hop from the double hop by the nested proxy host in its path.
- ``settings.proxy_base_url`` is pinned so local ``.env`` files don't leak in.
"""

from __future__ import annotations

from typing import Optional

import httpx
import pytest
import respx

from jobprep.scraper.fetcher import (
    FetchError,
    double_reader_url,
    fetch_job_text,
    reader_url,
)
from jobprep.scraper.models import ExtractionMethod

JOB_URL = "https://example.com/careers/designer"
_LONG_TEXT = "Lead the design of our enterprise onboarding experience. " * 8
_ARTICLE = f"""\
<html><head><title>Designer</title></head>
<body><article><h1>Designer</h1><p>{_LONG_TEXT}</p><p>{_LONG_TEXT}</p></article></body>
</html>
"""


@pytest.fixture(autouse=True)
def _pin_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("jobprep.config.settings.proxy_base_url", "https://r.jina.ai")


def _proxy_route(single: Optional[httpx.Response], double: Optional[httpx.Response]):
    """Return a respx side effect serving the single and double proxy hops."""
    seen: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode()
        is_double = "r.jina.ai" in path
        seen.append("double" if is_double else "single")
        response = double if is_double else single
        if response is None:
            raise httpx.ConnectError("proxy unreachable", request=request)
        return response

    return _handler, seen


# ---------------------------------------------------------------------------
# Proxy URL construction
# ---------------------------------------------------------------------------

class TestReaderUrls:
    def test_single_hop_preserves_scheme(self) -> None:
        assert reader_url("https://a.com/x") == "https://r.jina.ai/https://a.com/x"
        assert reader_url("http://a.com/x") == "https://r.jina.ai/http://a.com/x"

    def test_double_hop(self) -> None:
        assert (
            double_reader_url("https://a.com/x")
            == "https://r.jina.ai/http://r.jina.ai/https://a.com/x"
        )

    def test_custom_base(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("jobprep.config.settings.proxy_base_url", "https://reader.local/")
        assert reader_url("https://a.com") == "https://reader.local/https://a.com"
        assert (
            double_reader_url("https://a.com")
            == "https://reader.local/http://reader.local/https://a.com"
        )


# ---------------------------------------------------------------------------
# fetch_job_text
# ---------------------------------------------------------------------------

class TestFetchJobText:
    async def test_direct_success(self) -> None:
        with respx.mock(assert_all_called=False) as router:
            router.get(JOB_URL).mock(return_value=httpx.Response(200, text=_ARTICLE))
            proxy = router.route(host="r.jina.ai")
            result = await fetch_job_text(JOB_URL)

        assert result.method is ExtractionMethod.READABILITY
        assert "enterprise onboarding" in result.text
        assert not proxy.called

    async def test_direct_sends_browser_headers(self) -> None:
        with respx.mock:
            route = respx.get(JOB_URL).mock(return_value=httpx.Response(200, text=_ARTICLE))
            await fetch_job_text(JOB_URL)

        request = route.calls.last.request
        assert request.headers["User-Agent"].startswith("Mozilla/5.0")
        assert request.headers["Accept"].startswith("text/html")

    async def test_direct_failure_falls_through_to_single_hop(self) -> None:
        handler, seen = _proxy_route(httpx.Response(200, text=_LONG_TEXT), None)
        with respx.mock:
            respx.get(JOB_URL).mock(return_value=httpx.Response(403, text=_ARTICLE))
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            result = await fetch_job_text(JOB_URL)

        assert result.method is ExtractionMethod.JINA
        assert result.text == _LONG_TEXT.strip()
        assert seen == ["single"]

    async def test_thin_direct_page_falls_through(self) -> None:
        handler, seen = _proxy_route(httpx.Response(200, text=_LONG_TEXT), None)
        with respx.mock:
            respx.get(JOB_URL).mock(
                return_value=httpx.Response(200, text="<div id='root'></div>")
            )
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            result = await fetch_job_text(JOB_URL)

        assert result.method is ExtractionMethod.JINA

    async def test_network_error_on_direct_is_absorbed(self) -> None:
        handler, _ = _proxy_route(httpx.Response(200, text=_LONG_TEXT), None)
        with respx.mock:
            respx.get(JOB_URL).mock(side_effect=httpx.ConnectTimeout)
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            result = await fetch_job_text(JOB_URL)

        assert result.method is ExtractionMethod.JINA

    async def test_single_hop_failure_falls_through_to_double(self) -> None:
        handler, seen = _proxy_route(
            httpx.Response(451, text="blocked"),
            httpx.Response(200, text=_LONG_TEXT),
        )
        with respx.mock:
            respx.get(JOB_URL).mock(return_value=httpx.Response(403))
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            result = await fetch_job_text(JOB_URL)

        assert result.method is ExtractionMethod.JINA_DOUBLE
        assert seen == ["single", "double"]

    async def test_short_single_hop_text_falls_through(self) -> None:
        handler, seen = _proxy_route(
            httpx.Response(200, text="Access denied"),
            httpx.Response(200, text=_LONG_TEXT),
        )
        with respx.mock:
            respx.get(JOB_URL).mock(return_value=httpx.Response(403))
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            result = await fetch_job_text(JOB_URL)

        assert result.method is ExtractionMethod.JINA_DOUBLE

    async def test_double_hop_failure_reports_direct_status(self) -> None:
        handler, seen = _proxy_route(
            httpx.Response(500, text="error"),
            httpx.Response(502, text="bad gateway"),
        )
        with respx.mock:
            respx.get(JOB_URL).mock(return_value=httpx.Response(403))
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            with pytest.raises(FetchError, match="Status 403") as excinfo:
                await fetch_job_text(JOB_URL)

        assert excinfo.value.status_code == 403
        assert seen == ["single", "double"]

    async def test_double_hop_network_error_is_fatal(self) -> None:
        handler, _ = _proxy_route(None, None)
        with respx.mock:
            respx.get(JOB_URL).mock(return_value=httpx.Response(404))
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            with pytest.raises(FetchError, match="Status 404"):
                await fetch_job_text(JOB_URL)

    async def test_unreachable_origin_reports_no_status(self) -> None:
        handler, _ = _proxy_route(None, None)
        with respx.mock:
            respx.get(JOB_URL).mock(side_effect=httpx.ConnectError)
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            with pytest.raises(FetchError) as excinfo:
                await fetch_job_text(JOB_URL)

        assert str(excinfo.value) == "Failed to fetch page."
        assert excinfo.value.status_code is None

    async def test_double_hop_insufficient_text(self) -> None:
        handler, _ = _proxy_route(
            httpx.Response(200, text="tiny"),
            httpx.Response(200, text="still tiny"),
        )
        with respx.mock:
            respx.get(JOB_URL).mock(return_value=httpx.Response(200, text="<p>tiny</p>"))
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            with pytest.raises(FetchError, match="Not enough readable text"):
                await fetch_job_text(JOB_URL)

    async def test_proxy_text_is_capped(self) -> None:
        handler, _ = _proxy_route(httpx.Response(200, text="y" * 20_000), None)
        with respx.mock:
            respx.get(JOB_URL).mock(return_value=httpx.Response(500))
            respx.route(host="r.jina.ai").mock(side_effect=handler)
            result = await fetch_job_text(JOB_URL)

        assert result.length == 12_000
