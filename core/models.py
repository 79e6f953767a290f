# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that flows
# through the weather server: log entries, call outcomes, and the content
# blocks that make up a tool response.
#
# WHY FROZEN DATACLASSES?
#   A LogEntry never changes once it is appended, and a ToolResponse never
#   changes once it is built.  frozen=True turns both of those rules into
#   something Python enforces for us.
#
# THE "NO DATA" SENTINEL:
#   An outbound call either succeeds with a parsed body or yields NO_DATA.
#   The reason for a failure is never carried here; it only shows up as a
#   log entry.  Callers branch on truthiness:
#
#       result = await fetch_json(...)
#       if not result:
#           return ToolResponse.text("Failed to ...")
#       body = result.body
# =============================================================================

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union


# -----------------------------------------------------------------------------
# LogEntry - one timestamped diagnostic line
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class LogEntry:
    """A single diagnostic message with the moment it was recorded."""

    timestamp: str      # ISO-8601, UTC, millisecond precision ("...Z")
    message: str

    @classmethod
    def now(cls, message: str) -> "LogEntry":
        stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        return cls(timestamp=stamp.replace("+00:00", "Z"), message=message)

    def render(self) -> str:
        return f"{self.timestamp}: {self.message}"


# -----------------------------------------------------------------------------
# CallResult - outcome of one outbound request
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Success:
    """A request that came back 2xx with a parseable JSON body."""

    body: Any

    def __bool__(self) -> bool:
        return True


class NoData:
    """Sentinel for "the call produced nothing usable".

    There is exactly one instance, ``NO_DATA``.  It is falsy so handlers can
    short-circuit with a plain ``if not result``.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DATA"


NO_DATA = NoData()

CallResult = Union[Success, NoData]


# -----------------------------------------------------------------------------
# ContentBlock / ToolResponse - what a tool hands back to the MCP client
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ContentBlock:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ToolResponse:
    """The final, immutable result of one tool invocation.

    Holds either one block (primary text) or two (primary text followed by
    the diagnostics block), in that order.
    """

    content: tuple[ContentBlock, ...]

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        """Build a single-block response (used by every early-exit path)."""
        return cls(content=(ContentBlock(text=text),))

    @property
    def texts(self) -> list[str]:
        return [block.text for block in self.content]
