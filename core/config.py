# =============================================================================
# core/config.py  -  Runtime Settings
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the handful of knobs the server exposes from environment variables
#   and freezes them into a Settings object.
#
#   main.py calls load_dotenv() before anything imports this module, so
#   values placed in a local .env file are picked up the same way as real
#   environment variables.
#
# VARIABLES:
#   NWS_API_BASE          Base URL of the National Weather Service API
#   NWS_USER_AGENT        User-Agent sent with every request (NWS requires one)
#   NWS_TIMEOUT_SECONDS   Hard per-request timeout
#   LOG_BUFFER_SIZE       Capacity of every diagnostic log buffer
#   MCP_TRANSPORT         FastMCP transport ("stdio", "http", "sse")
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.weather.gov"
DEFAULT_USER_AGENT = "weather-mcp/1.0"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_LOG_BUFFER_SIZE = 100
DEFAULT_TRANSPORT = "stdio"


@dataclass(frozen=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_buffer_size: int = DEFAULT_LOG_BUFFER_SIZE
    transport: str = DEFAULT_TRANSPORT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build Settings from the environment.

        Unset variables use the defaults above.  A numeric variable that does
        not parse (or is not positive) also falls back to its default, with a
        warning, so a typo in .env never stops the server from starting.

        Args:
            environ: Mapping to read from.  Defaults to os.environ.

        Returns:
            A frozen Settings instance.
        """
        env = os.environ if environ is None else environ

        return cls(
            api_base=env.get("NWS_API_BASE", DEFAULT_API_BASE).rstrip("/"),
            user_agent=env.get("NWS_USER_AGENT", DEFAULT_USER_AGENT),
            timeout_seconds=_positive(env, "NWS_TIMEOUT_SECONDS", float, DEFAULT_TIMEOUT_SECONDS),
            log_buffer_size=_positive(env, "LOG_BUFFER_SIZE", int, DEFAULT_LOG_BUFFER_SIZE),
            transport=env.get("MCP_TRANSPORT", DEFAULT_TRANSPORT),
        )


def _positive(env: Mapping[str, str], name: str, kind, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = kind(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a valid {kind.__name__}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring {name}={raw!r}: must be positive")
        return default
    return value
