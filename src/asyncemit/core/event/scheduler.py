"""
EmissionScheduler: delivery of one emission to its snapshotted listeners.

Purpose
-------
Runs the two emission algorithms over listener snapshots taken by the
Emitter, re-checking live membership before each invocation.

Execution Model
---------------
Both modes first yield once to the event loop (``asyncio.sleep(0)``), so an
emission never delivers synchronously with the call that triggered it.

- CONCURRENT:
    - One task per snapshotted listener, per-event listeners first, then
      wildcard listeners, created in snapshot order
    - Each task re-checks membership when it starts running, so a listener
      unsubscribed by an earlier sibling's synchronous prefix is skipped
    - Awaited until every task settles; the earliest failure (by completion
      time) is re-raised, siblings are never cancelled
    - Cancelling the emitting caller does not cancel started invocations

- SERIAL:
    - Listeners awaited one at a time in snapshot order
    - Per-event phase, then wildcard phase
    - First failure propagates immediately; the rest of that phase and the
      wildcard phase are not run

Listener Invocation
-------------------
Listeners are called inline on the event loop thread. If the call returns an
awaitable it is awaited. Sync listeners are never pushed to an executor: a
listener may mutate the registry, and the registry is only safe on the loop
thread.
"""

from __future__ import annotations

import asyncio
import inspect
from logging import Logger
from typing import Any, Callable, Mapping, Optional, Sequence

from asyncemit.core.event.context import event_log_context
from asyncemit.core.event.errors import describe_listener, record_listener_error
from asyncemit.core.event.metrics import EmitterMetricsRecorder
from asyncemit.core.event.registry import is_registered
from asyncemit.core.event.types import EmissionMode, Listener, WildcardListener


class EmissionScheduler:
    """
    Executes emissions in CONCURRENT or SERIAL mode.

    Examples
    --------
    >>> scheduler = EmissionScheduler()
    >>> await scheduler.execute(
    ...     mode=EmissionMode.SERIAL,
    ...     event_name="user.created",
    ...     data={"id": 1},
    ...     listeners=(on_created,),
    ...     live_listeners=registry.listeners_for("user.created"),
    ...     wildcard_listeners=(),
    ...     live_wildcard=registry.wildcard_listeners,
    ...     metrics=None,
    ...     logger=logger,
    ... )
    """

    def __init__(self) -> None:
        # Strong references so invocations outliving a cancelled emission
        # are not garbage collected mid-flight.
        self._inflight: set[asyncio.Task[None]] = set()

    async def execute(
        self,
        *,
        mode: EmissionMode,
        event_name: str,
        data: Any,
        listeners: Sequence[Listener],
        live_listeners: Mapping[int, Listener],
        wildcard_listeners: Sequence[WildcardListener],
        live_wildcard: Mapping[int, WildcardListener],
        metrics: Optional[EmitterMetricsRecorder],
        logger: Logger,
    ) -> None:
        """
        Deliver one emission.

        Parameters
        ----------
        mode:
            CONCURRENT or SERIAL.
        event_name:
            Name of the event being emitted.
        data:
            Payload passed to every listener.
        listeners / wildcard_listeners:
            Immutable snapshots taken when the emission was requested.
        live_listeners / live_wildcard:
            The registry's live sets, consulted right before each invocation.
        metrics:
            Optional recorder for failures and skipped invocations.
        logger:
            Logger instance for structured logging.

        Raises
        ------
        Exception:
            Whatever a listener raised, unchanged.
        """
        with event_log_context(event_name, data, mode):
            await asyncio.sleep(0)

            logger.debug(
                "Emitter: delivering event",
                extra={
                    "event_name": event_name,
                    "mode": mode.value,
                    "listener_count": len(listeners),
                    "wildcard_count": len(wildcard_listeners),
                },
            )

            if mode is EmissionMode.SERIAL:
                await self._run_serial(
                    event_name=event_name,
                    data=data,
                    listeners=listeners,
                    live_listeners=live_listeners,
                    wildcard_listeners=wildcard_listeners,
                    live_wildcard=live_wildcard,
                    metrics=metrics,
                    logger=logger,
                )
            else:
                await self._run_concurrent(
                    event_name=event_name,
                    data=data,
                    listeners=listeners,
                    live_listeners=live_listeners,
                    wildcard_listeners=wildcard_listeners,
                    live_wildcard=live_wildcard,
                    metrics=metrics,
                    logger=logger,
                )

    async def _run_concurrent(
        self,
        *,
        event_name: str,
        data: Any,
        listeners: Sequence[Listener],
        live_listeners: Mapping[int, Listener],
        wildcard_listeners: Sequence[WildcardListener],
        live_wildcard: Mapping[int, WildcardListener],
        metrics: Optional[EmitterMetricsRecorder],
        logger: Logger,
    ) -> None:
        failures: list[BaseException] = []
        loop = asyncio.get_running_loop()
        tasks: list[asyncio.Task[None]] = []

        invocations = [
            (listener, (data,), live_listeners, False) for listener in listeners
        ] + [
            (listener, (event_name, data), live_wildcard, True)
            for listener in wildcard_listeners
        ]

        for listener, args, live, wildcard in invocations:
            task = loop.create_task(
                self._invoke(
                    listener=listener,
                    args=args,
                    live=live,
                    event_name=event_name,
                    wildcard=wildcard,
                    metrics=metrics,
                    logger=logger,
                    failures=failures,
                ),
                name=f"asyncemit-{event_name}-{describe_listener(listener)}",
            )
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
            tasks.append(task)

        if not tasks:
            return

        # Exceptions are collected through `failures` in completion order.
        await asyncio.shield(asyncio.gather(*tasks, return_exceptions=True))

        if failures:
            raise failures[0]

    async def _run_serial(
        self,
        *,
        event_name: str,
        data: Any,
        listeners: Sequence[Listener],
        live_listeners: Mapping[int, Listener],
        wildcard_listeners: Sequence[WildcardListener],
        live_wildcard: Mapping[int, WildcardListener],
        metrics: Optional[EmitterMetricsRecorder],
        logger: Logger,
    ) -> None:
        for listener in listeners:
            await self._invoke(
                listener=listener,
                args=(data,),
                live=live_listeners,
                event_name=event_name,
                wildcard=False,
                metrics=metrics,
                logger=logger,
            )

        for listener in wildcard_listeners:
            await self._invoke(
                listener=listener,
                args=(event_name, data),
                live=live_wildcard,
                event_name=event_name,
                wildcard=True,
                metrics=metrics,
                logger=logger,
            )

    async def _invoke(
        self,
        *,
        listener: Callable[..., Any],
        args: tuple[Any, ...],
        live: Mapping[int, Callable[..., Any]],
        event_name: str,
        wildcard: bool,
        metrics: Optional[EmitterMetricsRecorder],
        logger: Logger,
        failures: Optional[list[BaseException]] = None,
    ) -> None:
        """
        Invoke one snapshotted listener if it is still registered.

        Parameters
        ----------
        listener:
            The snapshotted listener.
        args:
            ``(data,)`` for per-event listeners, ``(event_name, data)`` for
            wildcard listeners.
        live:
            The live set the listener was snapshotted from.
        failures:
            When given, a failure is appended here before being re-raised, so
            concurrent callers can tell which failure completed first.
        """
        if not is_registered(live, listener):
            if metrics is not None:
                metrics.record_skip()
            logger.debug(
                "Emitter: skipping listener removed after snapshot",
                extra={
                    "event_name": event_name,
                    "listener": describe_listener(listener),
                    "wildcard": wildcard,
                },
            )
            return

        try:
            result = listener(*args)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            record_listener_error(
                logger=logger,
                event_name=event_name,
                listener=listener,
                wildcard=wildcard,
                exc=exc,
                metrics=metrics,
            )
            if failures is not None:
                failures.append(exc)
            raise
        except BaseException as exc:
            # CancelledError and exit signals: propagated, not counted.
            if failures is not None:
                failures.append(exc)
            raise
