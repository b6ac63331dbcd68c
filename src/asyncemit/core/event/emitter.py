"""
Emitter: in-process async publish/subscribe.

Purpose
-------
The public object through which independent pieces of one asyncio program
register interest in named events and react when those events are emitted.

Responsibilities
----------------
- Register/unregister per-event and wildcard listeners
- Return unsubscribe handles bound to one registration
- Emit concurrently or serially over a snapshot of current listeners
- Resolve one-shot futures on the next occurrence of an event
- Count and clear listeners
- Collect optional delivery metrics

Design Decisions
----------------
- **Instance-based**: every Emitter owns its own ListenerRegistry; nothing is
  shared between instances and there is no module-level singleton.
- **Snapshot at call time**: emit_concurrent()/emit_serial() validate and
  snapshot synchronously when called, then return the delivery coroutine.
  A bad event name therefore raises at the call site, before any suspension.
- **Recheck at invocation time**: a listener unsubscribed after the snapshot
  but before its turn is skipped.
- **Failures propagate**: listener exceptions reach the emission caller
  unchanged. The emitter logs them at debug level only.

Thread Safety
-------------
Designed for single-threaded asyncio usage. Call every method from the
thread running the event loop.

Examples
--------
>>> emitter = Emitter()
>>> off = emitter.subscribe("user.created", on_user_created)
>>> await emitter.emit_concurrent("user.created", {"id": 1})
>>> off()
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Coroutine, Optional, Sequence

from asyncemit.core.config.config import Config
from asyncemit.core.event.binding import bind_emitter_methods
from asyncemit.core.event.errors import describe_listener
from asyncemit.core.event.metrics import EmitterMetrics, EmitterMetricsRecorder
from asyncemit.core.event.registry import ListenerRegistry
from asyncemit.core.event.scheduler import EmissionScheduler
from asyncemit.core.event.types import (
    EmissionMode,
    Listener,
    Unsubscribe,
    WildcardListener,
)
from asyncemit.core.event.validation import (
    assert_event_name,
    assert_listener,
    assert_optional_event_name,
)
from asyncemit.core.logging.logger import get_logger

logger = get_logger(__name__)


class Emitter:
    """
    Async event emitter with per-event and wildcard listeners.

    Listener Shapes
    ---------------
    - Per-event: ``listener(data)``
    - Wildcard: ``listener(event_name, data)``

    Either may be sync or return an awaitable.

    Examples
    --------
    >>> emitter = Emitter()
    >>> emitter.subscribe("x", lambda data: print("x", data))
    >>> emitter.subscribe_any(lambda name, data: print("any", name, data))
    >>> await emitter.emit_serial("x", 42)
    x 42
    any x 42
    """

    def __init__(
        self,
        *,
        enable_metrics: Optional[bool] = None,
        scheduler: Optional[EmissionScheduler] = None,
        metrics: Optional[EmitterMetricsRecorder] = None,
    ) -> None:
        """
        Initialize an emitter.

        Parameters
        ----------
        enable_metrics:
            Whether to collect delivery metrics. Defaults to
            Config.METRICS_ENABLED.
        scheduler:
            Optional EmissionScheduler. Creates a default if None.
        metrics:
            Optional EmitterMetricsRecorder. Creates a default if None.
        """
        self._registry = ListenerRegistry()
        self._scheduler = scheduler or EmissionScheduler()
        self._metrics = metrics or EmitterMetricsRecorder()
        self._metrics_enabled = (
            Config.METRICS_ENABLED if enable_metrics is None else enable_metrics
        )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} events={len(self._registry.event_names())} "
            f"listeners={self._registry.total_count()}>"
        )

    # ------------------------------------------------------------------ #
    # Subscription API
    # ------------------------------------------------------------------ #

    def subscribe(self, event_name: str, listener: Listener) -> Unsubscribe:
        """
        Subscribe a listener to an event.

        Parameters
        ----------
        event_name:
            Name of the event.
        listener:
            Callable taking the event payload. May be sync or async.

        Returns
        -------
        Unsubscribe:
            Zero-argument handle removing exactly this registration. Calling
            it more than once is a no-op.

        Raises
        ------
        EmitterValidationError:
            If event_name is not a string or listener is not callable.

        Examples
        --------
        >>> off = emitter.subscribe("user.created", on_created)
        >>> emitter.listener_count("user.created")
        1
        >>> off()
        >>> emitter.listener_count("user.created")
        0
        """
        assert_event_name(event_name)
        assert_listener(listener)

        if self._registry.add_listener(event_name, listener):
            logger.debug(
                "Emitter: subscribed listener",
                extra={"event_name": event_name, "listener": describe_listener(listener)},
            )

        return functools.partial(self.unsubscribe, event_name, listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> None:
        """
        Remove a listener from an event. No error if it was not subscribed.

        Raises
        ------
        EmitterValidationError:
            If event_name is not a string or listener is not callable.
        """
        assert_event_name(event_name)
        assert_listener(listener)

        if self._registry.remove_listener(event_name, listener):
            logger.debug(
                "Emitter: unsubscribed listener",
                extra={"event_name": event_name, "listener": describe_listener(listener)},
            )

    def subscribe_any(self, listener: WildcardListener) -> Unsubscribe:
        """
        Subscribe a listener to every event.

        The listener is called as ``listener(event_name, data)``.

        Returns
        -------
        Unsubscribe:
            Handle removing this wildcard registration.
        """
        assert_listener(listener)

        if self._registry.add_wildcard(listener):
            logger.debug(
                "Emitter: subscribed wildcard listener",
                extra={"listener": describe_listener(listener)},
            )

        return functools.partial(self.unsubscribe_any, listener)

    def unsubscribe_any(self, listener: WildcardListener) -> None:
        """Remove a wildcard listener. No error if it was not subscribed."""
        assert_listener(listener)

        if self._registry.remove_wildcard(listener):
            logger.debug(
                "Emitter: unsubscribed wildcard listener",
                extra={"listener": describe_listener(listener)},
            )

    def subscribe_once(self, event_name: str) -> "asyncio.Future[Any]":
        """
        Wait for the next emission of an event.

        Must be called from code running on an event loop. The returned
        future resolves with the payload of the first emission of
        ``event_name`` after this call. The internal listener removes itself
        before resolving, and is also removed if the future is cancelled.

        Raises
        ------
        EmitterValidationError:
            If event_name is not a string.
        RuntimeError:
            If no event loop is running.

        Examples
        --------
        >>> ready = emitter.subscribe_once("ready")
        >>> ...
        >>> payload = await ready
        """
        assert_event_name(event_name)
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

        def resolve(data: Any) -> None:
            off()
            if not future.done():
                future.set_result(data)

        off = self.subscribe(event_name, resolve)
        future.add_done_callback(lambda _: off())
        return future

    # ------------------------------------------------------------------ #
    # Emission API
    # ------------------------------------------------------------------ #

    def emit_concurrent(
        self, event_name: str, data: Any = None
    ) -> Coroutine[Any, Any, None]:
        """
        Emit an event to all listeners at once.

        Listeners are snapshotted now; delivery starts after one yield to the
        event loop. Every still-subscribed listener is started without
        waiting for the others. The returned coroutine completes when all of
        them have settled and re-raises the first failure, if any.

        Parameters
        ----------
        event_name:
            Name of the event.
        data:
            Payload passed to listeners.

        Raises
        ------
        EmitterValidationError:
            Immediately, if event_name is not a string.

        Examples
        --------
        >>> await emitter.emit_concurrent("user.created", {"id": 1})
        """
        return self._emit(EmissionMode.CONCURRENT, event_name, data)

    def emit_serial(self, event_name: str, data: Any = None) -> Coroutine[Any, Any, None]:
        """
        Emit an event to listeners one at a time.

        Per-event listeners run in registration order, each awaited before
        the next starts; wildcard listeners follow in the same manner. The
        first failure stops delivery, including the wildcard phase, and is
        raised to the caller.

        Raises
        ------
        EmitterValidationError:
            Immediately, if event_name is not a string.
        """
        return self._emit(EmissionMode.SERIAL, event_name, data)

    def _emit(
        self, mode: EmissionMode, event_name: str, data: Any
    ) -> Coroutine[Any, Any, None]:
        assert_event_name(event_name)

        live_listeners = self._registry.listeners_for(event_name)
        live_wildcard = self._registry.wildcard_listeners
        listeners, wildcard_listeners = self._registry.snapshot(event_name)

        if self._metrics_enabled:
            self._metrics.record_emit(event_name, mode)

        return self._scheduler.execute(
            mode=mode,
            event_name=event_name,
            data=data,
            listeners=listeners,
            live_listeners=live_listeners,
            wildcard_listeners=wildcard_listeners,
            live_wildcard=live_wildcard,
            metrics=self._metrics if self._metrics_enabled else None,
            logger=logger,
        )

    # ------------------------------------------------------------------ #
    # Maintenance & Introspection
    # ------------------------------------------------------------------ #

    def clear_listeners(self, event_name: Optional[str] = None) -> None:
        """
        Remove listeners.

        Parameters
        ----------
        event_name:
            If given, removes only that event's listeners. If omitted,
            removes every per-event listener and every wildcard listener.
        """
        assert_optional_event_name(event_name)

        removed = self._registry.clear(event_name)
        logger.debug(
            "Emitter: cleared listeners",
            extra={"event_name": event_name, "removed": removed},
        )

    def listener_count(self, event_name: Optional[str] = None) -> int:
        """
        Count listeners.

        Parameters
        ----------
        event_name:
            If given, wildcard listeners plus that event's listeners.
            If omitted, wildcard listeners plus every event's listeners.

        Raises
        ------
        EmitterValidationError:
            If event_name is neither a string nor None.

        Examples
        --------
        >>> emitter.listener_count()
        0
        >>> emitter.subscribe_any(log_everything)
        >>> emitter.subscribe("y", on_y)
        >>> emitter.listener_count()
        2
        """
        assert_optional_event_name(event_name)

        if event_name is None:
            return self._registry.total_count()
        return self._registry.wildcard_count() + self._registry.count_for_event(event_name)

    def event_names(self) -> list[str]:
        """Sorted names of events with at least one per-event listener."""
        return self._registry.event_names()

    def bind_methods(
        self, target: Any, method_names: Optional[Sequence[str]] = None
    ) -> None:
        """
        Copy bound emitter methods onto ``target``.

        Parameters
        ----------
        target:
            Object receiving the methods as attributes.
        method_names:
            Operation names to bind. Defaults to every public operation.

        Raises
        ------
        EmitterValidationError:
            If target cannot carry attributes or method_names is malformed.
        EmitterConfigurationError:
            If a name is unknown or target already has that attribute.

        Examples
        --------
        >>> service = SimpleNamespace()
        >>> emitter.bind_methods(service, ["subscribe", "emit_serial"])
        >>> service.subscribe("ready", on_ready)
        """
        bind_emitter_methods(self, target, method_names)

    # ------------------------------------------------------------------ #
    # Metrics
    # ------------------------------------------------------------------ #

    def get_metrics(self) -> Optional[EmitterMetrics]:
        """Immutable metrics snapshot, or None when metrics are disabled."""
        if not self._metrics_enabled:
            return None
        return self._metrics.snapshot(total_listeners=self._registry.total_count())

    def get_metrics_summary(self) -> dict[str, Any]:
        metrics = self.get_metrics()
        if metrics is None:
            return {}
        return metrics.get_summary()

    def enable_metrics(self) -> None:
        self._metrics_enabled = True
        logger.debug("Emitter: metrics enabled")

    def disable_metrics(self) -> None:
        self._metrics_enabled = False
        logger.debug("Emitter: metrics disabled")
