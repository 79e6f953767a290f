# =============================================================================
# core/nws.py  -  Bounded Request Executor for the National Weather Service API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Issues exactly one GET against api.weather.gov and turns the outcome into
#   a CallResult: Success(body) or NO_DATA.  It never raises to its caller.
#   Handlers chain several fetches one after another and only need to know
#   whether data came back; the *reason* it didn't is written to the
#   Diagnostics log instead.
#
# TIMEOUT & CANCELLATION:
#   The request runs as its own asyncio task.  We race it against
#     a) the timeout (default 10 s), and
#     b) an optional external cancel token (an asyncio.Event).
#   Whoever loses is cancelled AND awaited before we return, so an abandoned
#   request always releases its connection.  httpx's own timeout is set
#   to the same value as a second line of defence at the transport level.
#
# NO RETRIES:
#   One call, one attempt.  Nothing is cached between calls either.
# =============================================================================

import asyncio
from typing import Optional

import httpx

from core.config import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from core.diagnostics import Diagnostics
from core.models import NO_DATA, CallResult, Success

GEO_JSON = "application/geo+json"

# Error bodies from NWS can be large problem+json documents; keep log lines short.
_BODY_SNIPPET_CHARS = 500


def build_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    return {"User-Agent": user_agent, "Accept": GEO_JSON}


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    diagnostics: Diagnostics,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    cancel: Optional[asyncio.Event] = None,
) -> CallResult:
    """Fetch ``url`` and parse it as JSON, converting every failure to NO_DATA.

    Args:
        client: Shared httpx client (its transport decides where bytes go).
        url: Absolute URL to GET.
        diagnostics: Where progress and failure details are logged.
        user_agent: Value of the User-Agent header.
        timeout: Seconds before the request is abandoned.
        cancel: Optional token; setting it aborts the request early.

    Returns:
        Success(parsed_json) or NO_DATA.
    """
    diagnostics.log(f"Making request to: {url}")

    request = asyncio.ensure_future(
        client.get(url, headers=build_headers(user_agent), timeout=timeout)
    )
    waiters = {request}
    aborted = None
    if cancel is not None:
        aborted = asyncio.ensure_future(cancel.wait())
        waiters.add(aborted)

    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in waiters:
            if not task.done():
                task.cancel()
        await asyncio.gather(*waiters, return_exceptions=True)

    if request not in done:
        if aborted is not None and aborted in done:
            diagnostics.warning("Request aborted")
        else:
            diagnostics.warning("Request timed out")
        return NO_DATA

    try:
        response = request.result()
    except httpx.TimeoutException:
        diagnostics.warning("Request timed out")
        return NO_DATA
    except httpx.HTTPError as exc:
        diagnostics.warning(f"HTTP error: {exc!r}")
        return NO_DATA
    except Exception as exc:
        diagnostics.warning(f"Error making NWS request: {exc!r}")
        return NO_DATA

    if not response.is_success:
        diagnostics.warning(f"HTTP error: {response.status_code} {response.reason_phrase}")
        diagnostics.warning(
            f"Status: {response.status_code}, Data: {response.text[:_BODY_SNIPPET_CHARS]}"
        )
        return NO_DATA

    try:
        return Success(response.json())
    except ValueError as exc:
        diagnostics.warning(f"Invalid JSON in response from {url}: {exc}")
        return NO_DATA
