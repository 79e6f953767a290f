# =============================================================================
# main.py  -  Entry Point for the Weather MCP Server
# =============================================================================
#
# HOW TO RUN:
#   python main.py                 (or the installed `weather-mcp` script)
#
# WHAT HAPPENS:
#   1. Loads .env so NWS_* / MCP_TRANSPORT settings are in the environment
#   2. Imports the FastMCP server (which reads Settings at import time)
#   3. Runs it on the configured transport (stdio by default)
#
# FATAL ERRORS:
#   Anything that escapes the server (e.g., the transport failing to start)
#   is logged to stderr and the process exits with status 1.  Errors inside
#   individual tool calls never reach this level; they become informational
#   tool responses.
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

# Load environment variables from .env BEFORE importing the server, because
# tools.mcp_server builds its Settings when it is first imported.
load_dotenv()

from tools.mcp_server import SETTINGS, mcp


def main() -> int:
    try:
        mcp.run(transport=SETTINGS.transport)
    except Exception as exc:
        logging.error(f"Fatal error in main(): {exc!r}")
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
