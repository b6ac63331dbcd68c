"""
ListenerRegistry: Storage and lookup for emitter listeners.

Purpose
-------
Owns the two listener collections of one emitter: the event-name -> listener
set mapping and the wildcard listener set.

Responsibilities
----------------
- Store per-event listeners, created lazily per event name
- Store wildcard listeners invoked for every event
- Take insertion-ordered snapshots for emission
- Answer live membership checks during emission
- Clear and count listeners

Design Decisions
----------------
- **Identity, not equality**: listeners are keyed by ``id(listener)`` and the
  dict value holds the listener itself. Any callable can register, hashable
  or not, and two distinct callables that compare equal stay two
  registrations. The held reference keeps the object (and so its id) alive
  while registered.
- **Dicts as ordered sets**: re-adding the same object is a no-op, and
  iteration order is registration order for snapshots.
- **Sets are mutated in place, never replaced**: an in-flight emission holds
  a reference to the live set it snapshotted and re-checks membership against
  it, so clearing must empty the same dict object.
- **Keys are never removed**: clearing an event empties its set but keeps the
  key, matching the lazily-created lifecycle.
- **No async/await**: asyncio runs on one thread, so dict mutations are atomic
  between awaits and no locking is needed.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from asyncemit.core.event.types import Listener, WildcardListener

ListenerSet = dict[int, Listener]
WildcardSet = dict[int, WildcardListener]


def is_registered(live: Mapping[int, Callable[..., Any]], listener: Callable[..., Any]) -> bool:
    """True if this exact listener object is in a live set."""
    return live.get(id(listener)) is listener


def _add(live: dict[int, Any], listener: Callable[..., Any]) -> bool:
    if is_registered(live, listener):
        return False
    live[id(listener)] = listener
    return True


def _remove(live: dict[int, Any], listener: Callable[..., Any]) -> bool:
    if not is_registered(live, listener):
        return False
    del live[id(listener)]
    return True


class ListenerRegistry:
    """
    Registry for per-event and wildcard listeners of a single emitter.

    Thread Safety
    -------------
    Not thread-safe. Designed for single-threaded asyncio usage where all
    modifications occur on the same event loop.

    Examples
    --------
    >>> registry = ListenerRegistry()
    >>> registry.add_listener("user.created", on_created)
    True
    >>> registry.add_listener("user.created", on_created)
    False
    >>> registry.count_for_event("user.created")
    1
    """

    def __init__(self) -> None:
        self._events: dict[str, ListenerSet] = {}
        self._wildcard: WildcardSet = {}

    # ------------------------------------------------------------------ #
    # Live Sets
    # ------------------------------------------------------------------ #

    def listeners_for(self, event_name: str) -> ListenerSet:
        """Return the live listener set for an event, creating it on first access."""
        listeners = self._events.get(event_name)
        if listeners is None:
            listeners = self._events[event_name] = {}
        return listeners

    @property
    def wildcard_listeners(self) -> WildcardSet:
        """The live wildcard listener set."""
        return self._wildcard

    # ------------------------------------------------------------------ #
    # Modification
    # ------------------------------------------------------------------ #

    def add_listener(self, event_name: str, listener: Listener) -> bool:
        """
        Register a listener for an event.

        Returns
        -------
        bool:
            True if the listener was added, False if this exact object was
            already registered for the event.
        """
        return _add(self.listeners_for(event_name), listener)

    def remove_listener(self, event_name: str, listener: Listener) -> bool:
        """
        Remove a listener from an event.

        Returns
        -------
        bool:
            True if a listener was removed, False if it was not registered.
        """
        return _remove(self.listeners_for(event_name), listener)

    def add_wildcard(self, listener: WildcardListener) -> bool:
        return _add(self._wildcard, listener)

    def remove_wildcard(self, listener: WildcardListener) -> bool:
        return _remove(self._wildcard, listener)

    def clear(self, event_name: Optional[str] = None) -> int:
        """
        Empty one event's set, or the wildcard set and every event's set.

        Parameters
        ----------
        event_name:
            If given, only this event's set is emptied. If None, everything
            is emptied. Keys stay in the registry either way.

        Returns
        -------
        int:
            Number of registrations removed.
        """
        if event_name is not None:
            listeners = self.listeners_for(event_name)
            removed = len(listeners)
            listeners.clear()
            return removed

        removed = self.total_count()
        self._wildcard.clear()
        for listeners in self._events.values():
            listeners.clear()
        return removed

    # ------------------------------------------------------------------ #
    # Snapshot
    # ------------------------------------------------------------------ #

    def snapshot(
        self, event_name: str
    ) -> tuple[tuple[Listener, ...], tuple[WildcardListener, ...]]:
        """
        Capture the current per-event and wildcard listeners in insertion order.

        The returned tuples are immutable; later subscribe/unsubscribe calls
        do not change them. Pair them with is_registered() against the live
        sets to check whether a snapshotted listener is still registered.
        """
        return (
            tuple(self.listeners_for(event_name).values()),
            tuple(self._wildcard.values()),
        )

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def count_for_event(self, event_name: str) -> int:
        """Number of per-event listeners for one event (wildcard excluded)."""
        return len(self._events.get(event_name, ()))

    def wildcard_count(self) -> int:
        return len(self._wildcard)

    def total_count(self) -> int:
        """Wildcard listeners plus every event's listeners."""
        return len(self._wildcard) + sum(
            len(listeners) for listeners in self._events.values()
        )

    def event_names(self) -> list[str]:
        """Sorted names of events that currently have at least one listener."""
        return sorted(name for name, listeners in self._events.items() if listeners)
