"""
Event log context helper.

Tags the current asyncio context with the event being emitted so that log
lines written by listeners (and by the emitter) carry ``event_name``. Each
listener invocation in a concurrent emission runs in its own task, which
copies this context at creation time.

Only the payload's type is recorded, never its value, so payload contents do
not end up in logs by default.
"""

from __future__ import annotations

from typing import Any

from asyncemit.core.event.types import EmissionMode
from asyncemit.core.logging.logger import LogContext


def event_log_context(event_name: str, payload: Any, mode: EmissionMode) -> LogContext:
    """
    Build a scoped LogContext for one emission.

    Examples
    --------
    >>> with event_log_context("user.created", {"id": 1}, EmissionMode.SERIAL):
    ...     logger.info("delivering")  # carries event_name="user.created"
    """
    return LogContext(
        component="asyncemit",
        operation=f"emit_{mode.value}",
        event_name=event_name,
        payload_type=type(payload).__name__,
    )
