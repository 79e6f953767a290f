# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP and core/.  It:
#     1. Declares each tool's name, description and argument bounds
#     2. Creates per-call resources (httpx client, Diagnostics scope)
#     3. Converts core ToolResponse objects into MCP text content
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk to the NWS API directly (core/nws.py does)
#   - They do NOT format weather data (core/weather.py does)
# =============================================================================
