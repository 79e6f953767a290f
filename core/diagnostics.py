# =============================================================================
# core/diagnostics.py  -  Log Buffers, Diagnostics Scopes & Response Composer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   MCP clients only see what comes back in a tool response; they have no
#   view of the server's stderr.  So the server collects diagnostic lines
#   while a tool runs and attaches them to that tool's response as a
#   trailing "--- Debug Logs ---" block.
#
# THE PIECES:
#   LogBuffer    Bounded FIFO of LogEntry objects (oldest evicted first).
#   Diagnostics  The logging capability handed to the executor and handlers.
#                One is created per tool invocation.  Each log() call goes
#                to three separate sinks:
#                  1. this invocation's own scope buffer
#                  2. the process-wide history buffer (read by get-logs)
#                  3. Python logging (stderr)
#   compose()    Drains an invocation's scope into the final ToolResponse.
#   read_logs()  Non-draining view of the history for the get-logs tool.
#
# CONCURRENCY:
#   Because every invocation drains only its own scope, two tool calls that
#   run at the same time can never steal each other's log lines.  The shared
#   history only ever receives appends and read-only snapshots.
# =============================================================================

import logging
from collections import deque
from typing import Optional

from core.models import ContentBlock, LogEntry, ToolResponse

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
DEBUG_LOGS_HEADER = "--- Debug Logs ---"
RECENT_LOGS_HEADER = "Recent server logs:"
NO_LOGS_MESSAGE = "No logs available."


class LogBuffer:
    """Bounded, ordered sequence of LogEntry objects.

    Appending past capacity silently evicts from the front, so
    ``len(buffer) <= capacity`` holds at all times.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, message: str) -> None:
        self._entries.append(LogEntry.now(message))

    def push(self, entry: LogEntry) -> None:
        """Append an already-built entry (lets one entry land in several buffers)."""
        self._entries.append(entry)

    def drain(self) -> list[LogEntry]:
        """Return every entry in order and leave the buffer empty."""
        entries = list(self._entries)
        self._entries.clear()
        return entries

    def peek_last(self, k: int) -> list[LogEntry]:
        """Return the newest ``min(k, len)`` entries, oldest first, without mutating."""
        if k <= 0:
            return []
        return list(self._entries)[-k:]


class Diagnostics:
    """Per-invocation logging capability.

    Args:
        history: Process-wide buffer that also receives every entry.  When
                 None, entries go only to the scope and to logging.
        capacity: Size of this invocation's own scope buffer.
    """

    def __init__(self, history: Optional[LogBuffer] = None, capacity: int = DEFAULT_CAPACITY):
        self.scope = LogBuffer(capacity)
        self.history = history

    def log(self, message: str, level: int = logging.INFO) -> None:
        entry = LogEntry.now(message)
        self.scope.push(entry)
        if self.history is not None:
            self.history.push(entry)
        logger.log(level, message)

    def warning(self, message: str) -> None:
        self.log(message, level=logging.WARNING)


def compose(primary: ContentBlock, diagnostics: Diagnostics) -> ToolResponse:
    """Build the final response, attaching (and draining) buffered diagnostics.

    Call this as the very last step of a successful handler so it picks up
    everything the handler and its fetches logged.

    Returns:
        ``[primary]`` when nothing was logged, otherwise
        ``[primary, debug-logs block]``.
    """
    entries = diagnostics.scope.drain()
    if not entries:
        return ToolResponse(content=(primary,))

    lines = [DEBUG_LOGS_HEADER] + [entry.render() for entry in entries]
    return ToolResponse(content=(primary, ContentBlock(text="\n".join(lines))))


def read_logs(history: LogBuffer, lines: int = 20) -> ToolResponse:
    """Snapshot the newest ``lines`` history entries without draining anything."""
    recent = history.peek_last(lines)
    if not recent:
        return ToolResponse.text(NO_LOGS_MESSAGE)
    body = "\n".join(entry.render() for entry in recent)
    return ToolResponse.text(f"{RECENT_LOGS_HEADER}\n\n{body}")
