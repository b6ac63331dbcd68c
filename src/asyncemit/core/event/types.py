"""
Core Event Types for asyncemit.

Purpose
-------
Type aliases shared across the event system: listener shapes, the
unsubscribe handle, the emission mode enum, and the public operation surface
used by the mixin and bind-methods helpers.

Listener Shapes
---------------
- Listener: ``listener(data)``, registered per event name.
- WildcardListener: ``listener(event_name, data)``, receives every event.

Either shape may return a plain value or an awaitable. Awaitables are awaited
by the emission algorithms; plain values are ignored.

Dependencies
------------
- enum (Python stdlib)
- typing (Python stdlib)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Union

Listener = Callable[[Any], Union[Any, Awaitable[Any]]]

WildcardListener = Callable[[str, Any], Union[Any, Awaitable[Any]]]

# Zero-argument callable that removes one prior registration.
Unsubscribe = Callable[[], None]


class EmissionMode(Enum):
    """
    How an emission delivers to its snapshotted listeners.

    CONCURRENT:
        Every eligible listener is started without waiting for the others;
        the emission completes once all have settled.
    SERIAL:
        Listeners run one at a time in registration order, per-event first,
        then wildcard.
    """

    CONCURRENT = "concurrent"
    SERIAL = "serial"


# Public operation surface; also the default allow-list for mixin and
# bind_methods.
EMITTER_METHODS: tuple[str, ...] = (
    "subscribe",
    "unsubscribe",
    "subscribe_once",
    "emit_concurrent",
    "emit_serial",
    "subscribe_any",
    "unsubscribe_any",
    "clear_listeners",
    "listener_count",
    "bind_methods",
)
