# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL logic for the weather server: data models,
# diagnostics, the bounded NWS request executor and the tool handlers.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or the MCP SDK.  The handlers
#   take their collaborators (httpx client, Settings, Diagnostics) as
#   arguments, so they can be exercised with a mock transport and no server.
# =============================================================================
