"""
Bounded NWS request executor tests
"""

import asyncio

import httpx

from core.diagnostics import Diagnostics
from core.models import NO_DATA, Success
from core.nws import GEO_JSON, fetch_json

URL = "https://api.weather.gov/alerts?area=CA"


def _fetch(handler, **kwargs):
    """Run fetch_json against a MockTransport handler; return (result, messages)."""
    diagnostics = Diagnostics()

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_json(client, URL, diagnostics, **kwargs)

    result = asyncio.run(go())
    return result, [entry.message for entry in diagnostics.scope.drain()]


class TestFetchSuccess:
    def test_returns_parsed_body(self):
        result, messages = _fetch(lambda request: httpx.Response(200, json={"features": []}))

        assert isinstance(result, Success)
        assert result.body == {"features": []}
        assert messages == [f"Making request to: {URL}"]

    def test_sends_fixed_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        _fetch(handler, user_agent="weather-mcp/1.0")

        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert seen[0].headers["User-Agent"] == "weather-mcp/1.0"
        assert seen[0].headers["Accept"] == GEO_JSON


class TestFetchTimeout:
    def test_timeout_returns_no_data_and_cancels_transport(self):
        cancelled = []

        async def hang(request):
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                cancelled.append(str(request.url))
                raise
            return httpx.Response(200, json={})

        result, messages = _fetch(hang, timeout=0.05)

        assert result is NO_DATA
        assert messages.count("Request timed out") == 1
        assert cancelled == [URL]

    def test_transport_timeout_exception(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        result, messages = _fetch(handler)

        assert result is NO_DATA
        assert messages.count("Request timed out") == 1


class TestFetchCancellation:
    def test_external_cancel_aborts_request(self):
        cancelled = []
        diagnostics = Diagnostics()

        async def hang(request):
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise
            return httpx.Response(200, json={})

        async def go():
            cancel = asyncio.Event()
            asyncio.get_running_loop().call_later(0.01, cancel.set)
            async with httpx.AsyncClient(transport=httpx.MockTransport(hang)) as client:
                return await fetch_json(client, URL, diagnostics, timeout=5, cancel=cancel)

        result = asyncio.run(go())
        messages = [entry.message for entry in diagnostics.scope.drain()]

        assert result is NO_DATA
        assert "Request aborted" in messages
        assert "Request timed out" not in messages
        assert cancelled == [True]

    def test_unset_token_does_not_interfere(self):
        diagnostics = Diagnostics()

        async def go():
            cancel = asyncio.Event()
            transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": 1}))
            async with httpx.AsyncClient(transport=transport) as client:
                return await fetch_json(client, URL, diagnostics, cancel=cancel)

        result = asyncio.run(go())
        assert result.body == {"ok": 1}


class TestFetchFailures:
    def test_non_2xx_logs_status_and_body(self):
        result, messages = _fetch(lambda request: httpx.Response(500, text="upstream exploded"))

        assert result is NO_DATA
        assert any(m.startswith("HTTP error: 500") for m in messages)
        assert "Status: 500, Data: upstream exploded" in messages

    def test_long_error_body_is_truncated(self):
        result, messages = _fetch(lambda request: httpx.Response(503, text="x" * 5000))

        status_line = [m for m in messages if m.startswith("Status: 503")][0]
        assert result is NO_DATA
        assert len(status_line) < 600

    def test_malformed_json(self):
        result, messages = _fetch(lambda request: httpx.Response(200, text="{not json"))

        assert result is NO_DATA
        assert any(m.startswith("Invalid JSON in response from") for m in messages)

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result, messages = _fetch(handler)

        assert result is NO_DATA
        assert any("connection refused" in m for m in messages)

    def test_single_attempt_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502, text="bad gateway")

        _fetch(handler)
        assert len(calls) == 1
