"""
Listener failure handling for the emitter.

Purpose
-------
One place that records a listener failure (debug log + metrics) before the
scheduler re-raises it to the emission caller.

Design Decisions
----------------
- **Never swallows**: this module only observes the failure. The caller
  re-raises the original exception object unchanged.
- **Debug level**: a listener failure is the caller's error to handle through
  the emission's own completion, so the emitter does not log it as its own
  error.
"""

from __future__ import annotations

from logging import Logger
from typing import Any, Callable, Optional

from asyncemit.core.event.metrics import EmitterMetricsRecorder


def describe_listener(listener: Callable[..., Any]) -> str:
    """Stable, human-readable name for a listener callable."""
    module = getattr(listener, "__module__", None) or "unknown"
    qualname = getattr(listener, "__qualname__", None) or getattr(
        listener, "__name__", type(listener).__name__
    )
    return f"{module}.{qualname}"


def record_listener_error(
    *,
    logger: Logger,
    event_name: str,
    listener: Callable[..., Any],
    wildcard: bool,
    exc: BaseException,
    metrics: Optional[EmitterMetricsRecorder],
) -> None:
    """
    Log a listener failure and update metrics.

    Parameters
    ----------
    logger:
        Logger instance to use.
    event_name:
        Name of the event that was being emitted.
    listener:
        The listener that raised.
    wildcard:
        True if the listener was invoked from the wildcard set.
    exc:
        The exception that was raised.
    metrics:
        Optional recorder to update. If None, metrics are skipped.

    Examples
    --------
    >>> try:
    ...     await invoke(listener, data)
    ... except Exception as exc:
    ...     record_listener_error(
    ...         logger=logger,
    ...         event_name="user.created",
    ...         listener=listener,
    ...         wildcard=False,
    ...         exc=exc,
    ...         metrics=recorder,
    ...     )
    ...     raise
    """
    if metrics is not None:
        metrics.record_error(event_name)

    logger.debug(
        "Emitter listener failed",
        extra={
            "event_name": event_name,
            "listener": describe_listener(listener),
            "wildcard": wildcard,
            "error": str(exc),
            "error_type": type(exc).__name__,
        },
        exc_info=exc,
    )
