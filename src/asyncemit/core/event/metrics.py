"""
EmitterMetrics and EmitterMetricsRecorder.

Purpose
-------
Counts what an emitter does so hosts can inspect delivery behaviour without
attaching listeners of their own.

Responsibilities
----------------
- Count emissions by event name and by emission mode
- Count invocations skipped because the listener was removed after the
  emission snapshot was taken
- Count listener failures by event name
- Produce immutable snapshots and summaries

Design Decisions
----------------
- **Recorder vs snapshot**: EmitterMetricsRecorder is mutable and owned by one
  emitter; EmitterMetrics is a frozen point-in-time copy.
- **Listener count is not tracked here**: the registry is the only source of
  truth for membership, so the emitter passes its live count into snapshot().
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from asyncemit.core.event.types import EmissionMode


@dataclass(frozen=True)
class EmitterMetrics:
    """
    Immutable snapshot of emitter metrics.

    Attributes
    ----------
    events_emitted:
        Mapping of event names to emission counts.
    emissions_by_mode:
        Mapping of EmissionMode values ("concurrent"/"serial") to counts.
    listener_errors:
        Mapping of event names to listener failure counts.
    skipped_invocations:
        Snapshotted listeners not invoked because they were unsubscribed
        before their turn.
    total_listeners:
        Registered listeners (per-event plus wildcard) at snapshot time.

    Examples
    --------
    >>> metrics = EmitterMetrics(
    ...     events_emitted={"user.created": 4},
    ...     listener_errors={"user.created": 1},
    ... )
    >>> metrics.get_summary()["error_rate"]
    25.0
    """

    events_emitted: dict[str, int] = field(default_factory=dict)
    emissions_by_mode: dict[str, int] = field(default_factory=dict)
    listener_errors: dict[str, int] = field(default_factory=dict)
    skipped_invocations: int = 0
    total_listeners: int = 0

    def get_summary(self) -> dict[str, Any]:
        """
        Generate a formatted summary of metrics.

        Returns
        -------
        dict[str, Any]:
            Summary containing:
            - total_events_emitted: Sum of all emissions
            - events_by_name: Dict mapping event names to counts
            - emissions_by_mode: Dict mapping mode to counts
            - total_errors: Sum of all listener failures
            - errors_by_event: Dict mapping event names to failure counts
            - skipped_invocations: Count of recheck skips
            - total_listeners: Listener count at snapshot time
            - error_rate: Failures per hundred emissions
        """
        total_events = sum(self.events_emitted.values())
        total_errors = sum(self.listener_errors.values())

        error_rate = (total_errors / max(1, total_events)) * 100.0

        return {
            "total_events_emitted": total_events,
            "events_by_name": dict(self.events_emitted),
            "emissions_by_mode": dict(self.emissions_by_mode),
            "total_errors": total_errors,
            "errors_by_event": dict(self.listener_errors),
            "skipped_invocations": self.skipped_invocations,
            "total_listeners": self.total_listeners,
            "error_rate": round(error_rate, 2),
        }


class EmitterMetricsRecorder:
    """
    Mutable metrics recorder for one emitter.

    Thread Safety
    -------------
    Not thread-safe. Designed for single-threaded asyncio usage.

    Examples
    --------
    >>> recorder = EmitterMetricsRecorder()
    >>> recorder.record_emit("user.created", EmissionMode.SERIAL)
    >>> recorder.record_error("user.created")
    >>> recorder.snapshot(total_listeners=2).listener_errors["user.created"]
    1
    """

    def __init__(self) -> None:
        self._events_emitted: defaultdict[str, int] = defaultdict(int)
        self._emissions_by_mode: defaultdict[str, int] = defaultdict(int)
        self._listener_errors: defaultdict[str, int] = defaultdict(int)
        self._skipped_invocations: int = 0

    def record_emit(self, event_name: str, mode: EmissionMode) -> None:
        self._events_emitted[event_name] += 1
        self._emissions_by_mode[mode.value] += 1

    def record_error(self, event_name: str) -> None:
        self._listener_errors[event_name] += 1

    def record_skip(self) -> None:
        self._skipped_invocations += 1

    def reset(self) -> None:
        """Zero every counter."""
        self._events_emitted.clear()
        self._emissions_by_mode.clear()
        self._listener_errors.clear()
        self._skipped_invocations = 0

    def snapshot(self, total_listeners: int = 0) -> EmitterMetrics:
        """
        Return an immutable snapshot of current metrics.

        Creates new dict instances to prevent accidental mutation leaks.
        """
        return EmitterMetrics(
            events_emitted=dict(self._events_emitted),
            emissions_by_mode=dict(self._emissions_by_mode),
            listener_errors=dict(self._listener_errors),
            skipped_invocations=self._skipped_invocations,
            total_listeners=total_listeners,
        )
