# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the MCP tools a client can call.  Each tool is a thin wrapper
#   around a core/ handler: it declares (and validates) the arguments,
#   creates the per-call Diagnostics scope and HTTP client, and converts the
#   core ToolResponse into MCP text content.
#
# HOW IT WORKS (the flow):
#   1. An MCP client calls a tool by name (e.g., "get-forecast")
#   2. FastMCP validates the arguments against the Field() bounds below
#   3. The tool opens an httpx client, builds a fresh Diagnostics scope,
#      and awaits the core/ handler
#   4. The handler's ToolResponse becomes a list of TextContent blocks
#
# TOOLS:
#   get-alerts    Active alerts for a US state
#   get-forecast  Forecast periods for a latitude/longitude
#   get-logs      Recent server log lines (read-only)
#
# RUNNING THIS SERVER:
#   Use main.py (it loads .env first and handles fatal startup errors):
#     python main.py
# =============================================================================

import logging
import sys
from contextlib import asynccontextmanager
from typing import Annotated, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import Field

from core.config import Settings
from core.diagnostics import Diagnostics, LogBuffer
from core.models import ToolResponse
from core.weather import (
    DEFAULT_ALERT_LIMIT,
    DEFAULT_LOG_LINES,
    get_alerts,
    get_forecast,
    get_logs,
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server communicates with the client via
# STDOUT (stdin/stdout is the MCP transport).  Anything written to stdout
# would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for the response summary
#     - YELLOW for intermediate status messages
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, response: ToolResponse) -> ToolResult:
    """Log a one-line summary of the response in GREEN, then convert it for MCP."""
    first_line = response.content[0].text.splitlines()[0] if response.content[0].text else ""
    logging.info(
        f"{_GREEN}  ← {tool_name} response: {len(response.content)} block(s), "
        f"{first_line!r}{_RESET}"
    )
    return ToolResult(
        content=[TextContent(type=block.type, text=block.text) for block in response.content]
    )


# =============================================================================
# Server factory
# =============================================================================
# Everything a server instance shares lives in this closure:
#   - settings   read once (main.py has already loaded .env)
#   - history    the process-wide LogBuffer behind get-logs; fed by every
#                Diagnostics scope, never drained
#   - transport  None means httpx's default network transport
#
# The lifespan hook runs once FastMCP has its transport streams open, so the
# "running" line only appears for a server that actually started.
# =============================================================================
def create_server(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    history = LogBuffer(settings.log_buffer_size)

    def http_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=transport, timeout=settings.timeout_seconds)

    def new_diagnostics() -> Diagnostics:
        return Diagnostics(history, capacity=settings.log_buffer_size)

    @asynccontextmanager
    async def lifespan(server: FastMCP):
        logging.info(f"Weather MCP Server running on {settings.transport}")
        yield {}

    mcp = FastMCP("weather", lifespan=lifespan)

    # -------------------------------------------------------------------------
    # TOOL 1: get-alerts
    # -------------------------------------------------------------------------
    @mcp.tool(name="get-alerts", description="Get weather alerts for a state")
    async def get_alerts_tool(
        state: Annotated[str, Field(min_length=2, max_length=2, description="Two-letter state code (e.g. CA, NY)")],
        limit: Annotated[int, Field(ge=1, le=50, description="Maximum number of alerts to return (default: 10)")] = DEFAULT_ALERT_LIMIT,
    ) -> ToolResult:
        _log_request("get-alerts", state=state, limit=limit)

        async with http_client() as client:
            response = await get_alerts(
                state, limit,
                client=client, settings=settings, diagnostics=new_diagnostics(),
            )
        return _log_response("get-alerts", response)

    # -------------------------------------------------------------------------
    # TOOL 2: get-forecast
    # -------------------------------------------------------------------------
    # Two NWS round-trips happen inside core.weather.get_forecast; this
    # wrapper only owns the client lifetime.
    @mcp.tool(name="get-forecast", description="Get weather forecast for a location")
    async def get_forecast_tool(
        latitude: Annotated[float, Field(ge=-90, le=90, description="Latitude of the location")],
        longitude: Annotated[float, Field(ge=-180, le=180, description="Longitude of the location")],
    ) -> ToolResult:
        _log_request("get-forecast", latitude=latitude, longitude=longitude)

        async with http_client() as client:
            response = await get_forecast(
                latitude, longitude,
                client=client, settings=settings, diagnostics=new_diagnostics(),
            )
        return _log_response("get-forecast", response)

    # -------------------------------------------------------------------------
    # TOOL 3: get-logs
    # -------------------------------------------------------------------------
    @mcp.tool(name="get-logs", description="Get recent server logs")
    async def get_logs_tool(
        lines: Annotated[int, Field(ge=1, le=100, description="Number of log lines to return (default: 20)")] = DEFAULT_LOG_LINES,
    ) -> ToolResult:
        _log_request("get-logs", lines=lines)
        _log_status(f"{len(history)} entries in history")
        return _log_response("get-logs", get_logs(history, lines))

    return mcp


# =============================================================================
# The process-wide server instance (what main.py runs)
# =============================================================================
SETTINGS = Settings.from_env()
mcp = create_server(SETTINGS)
