# =============================================================================
# core/weather.py  -  Alerts & Forecast Handlers
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Implements the three tools the server exposes, as plain async functions
#   that return a ToolResponse:
#
#     get_alerts    one NWS call   (/alerts?area=XX)
#     get_forecast  two NWS calls  (/points/lat,lon  ->  its "forecast" URL)
#     get_logs      no NWS call    (snapshot of the server's log history)
#
#   Nothing here imports FastMCP.  The tools/ layer validates arguments and
#   hands us an httpx client, the Settings and a fresh Diagnostics scope.
#
# THE SUCCESS / FAILURE ASYMMETRY:
#   Only the success path goes through compose(), which attaches the
#   "--- Debug Logs ---" block.  Every failure returns a single informational
#   block straight away.  The lines logged on a failed call are still
#   available to the client through get-logs.
#
# TOLERANT PARSING:
#   Every field in an NWS payload is treated as optional.  Missing values
#   render as "Unknown" / "No headline" / "No forecast available" rather
#   than raising.
# =============================================================================

from decimal import Decimal
from typing import Any, Optional

import httpx

from core.config import Settings
from core.diagnostics import Diagnostics, LogBuffer, compose, read_logs
from core.models import ContentBlock, ToolResponse
from core.nws import fetch_json

DEFAULT_ALERT_LIMIT = 10
DEFAULT_LOG_LINES = 20

ALERTS_FAILED = "Failed to retrieve alerts data"
FORECAST_URL_MISSING = "Failed to get forecast URL from grid point data"
FORECAST_INVALID = "Failed to retrieve valid forecast data"
FORECAST_EMPTY = "No forecast periods available"


# =============================================================================
# Field helpers
# =============================================================================
def _get_path(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing or not a dict."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _or(value: Any, default: str) -> Any:
    # 0 is a real temperature; only absent or blank values fall back.
    return default if value is None or value == "" else value


def _format_number(value: float) -> str:
    """Render a coordinate in plain decimal form (40.0 -> "40", 1e-05 -> "0.00001")."""
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


# =============================================================================
# Formatting (one NWS object -> one text stanza)
# =============================================================================
def format_alert(feature: dict) -> str:
    props = _get_path(feature, "properties")
    if not isinstance(props, dict):
        props = {}
    return "\n".join([
        f"Event: {_or(props.get('event'), 'Unknown')}",
        f"Area: {_or(props.get('areaDesc'), 'Unknown')}",
        f"Severity: {_or(props.get('severity'), 'Unknown')}",
        f"Status: {_or(props.get('status'), 'Unknown')}",
        f"Headline: {_or(props.get('headline'), 'No headline')}",
        "---",
    ])


def format_period(period: dict) -> str:
    if not isinstance(period, dict):
        period = {}
    return "\n".join([
        f"{_or(period.get('name'), 'Unknown')}:",
        f"Temperature: {_or(period.get('temperature'), 'Unknown')}°{_or(period.get('temperatureUnit'), 'F')}",
        f"Wind: {_or(period.get('windSpeed'), 'Unknown')} {_or(period.get('windDirection'), '')}",
        f"{_or(period.get('shortForecast'), 'No forecast available')}",
        "---",
    ])


# =============================================================================
# TOOL: get-alerts
# =============================================================================
async def get_alerts(
    state: str,
    limit: int = DEFAULT_ALERT_LIMIT,
    *,
    client: httpx.AsyncClient,
    settings: Settings,
    diagnostics: Diagnostics,
) -> ToolResponse:
    """Active NWS alerts for a two-letter state code.

    Args:
        state: Region code, any case ("ca" and "CA" are the same).
        limit: Maximum number of alerts to include (input order is kept).

    Returns:
        A composed ToolResponse on success, or a single informational block
        when the fetch failed or there are no alerts.
    """
    state_code = state.upper()
    alerts_url = f"{settings.api_base}/alerts?area={state_code}"

    result = await fetch_json(
        client, alerts_url, diagnostics,
        user_agent=settings.user_agent, timeout=settings.timeout_seconds,
    )
    if not result:
        return ToolResponse.text(ALERTS_FAILED)

    features = _get_path(result.body, "features")
    if not isinstance(features, list) or not features:
        return ToolResponse.text(f"No active alerts for {state_code}")

    formatted = [format_alert(feature) for feature in features[:limit]]
    alerts_text = f"Active alerts for {state_code}:\n\n" + "\n".join(formatted)
    return compose(ContentBlock(text=alerts_text), diagnostics)


# =============================================================================
# TOOL: get-forecast
# =============================================================================
async def get_forecast(
    latitude: float,
    longitude: float,
    *,
    client: httpx.AsyncClient,
    settings: Settings,
    diagnostics: Diagnostics,
) -> ToolResponse:
    """Two-stage forecast lookup: coordinate -> grid point -> forecast periods.

    Stage 2 is only attempted once stage 1 produced a forecast URL; each
    stage that fails returns its own message and stops the pipeline.
    """
    lat = f"{latitude:.4f}"
    lon = f"{longitude:.4f}"
    points_url = f"{settings.api_base}/points/{lat},{lon}"

    diagnostics.log(f"Requesting forecast for coordinates: {lat}, {lon}")
    diagnostics.log(f"URL: {points_url}")

    # Stage 1: grid point
    points = await fetch_json(
        client, points_url, diagnostics,
        user_agent=settings.user_agent, timeout=settings.timeout_seconds,
    )
    if not points:
        return ToolResponse.text(
            f"Failed to retrieve grid point data for coordinates: "
            f"{_format_number(latitude)}, {_format_number(longitude)}. "
            f"This location may not be supported by the NWS API "
            f"(only US locations are supported)."
        )

    forecast_url: Optional[str] = _get_path(points.body, "properties", "forecast")
    if not forecast_url or not isinstance(forecast_url, str):
        return ToolResponse.text(FORECAST_URL_MISSING)

    # Stage 2: forecast periods
    forecast = await fetch_json(
        client, forecast_url, diagnostics,
        user_agent=settings.user_agent, timeout=settings.timeout_seconds,
    )
    periods = _get_path(forecast.body, "properties", "periods") if forecast else None
    if not isinstance(periods, list):
        return ToolResponse.text(FORECAST_INVALID)
    if not periods:
        return ToolResponse.text(FORECAST_EMPTY)

    formatted = [format_period(period) for period in periods]
    forecast_text = (
        f"Forecast for {_format_number(latitude)}, {_format_number(longitude)}:\n\n"
        + "\n".join(formatted)
    )
    return compose(ContentBlock(text=forecast_text), diagnostics)


# =============================================================================
# TOOL: get-logs
# =============================================================================
def get_logs(history: LogBuffer, lines: int = DEFAULT_LOG_LINES) -> ToolResponse:
    """Recent server log lines.  Read-only: never drains, never calls NWS."""
    return read_logs(history, lines)
