"""
Emitter capability mixin.

Purpose
-------
Attach emitter capability to an existing class without changing its base
classes or source: a class decorator installs a lazily created, per-instance
Emitter plus forwarding methods for the selected operations.

Usage
-----
>>> @mixin("events", ["subscribe", "emit_serial"])
... class Downloader:
...     async def run(self):
...         await self.emit_serial("done", self.path)
...
>>> d = Downloader()
>>> d.subscribe("done", print)
>>> d.events
<Emitter events=1 listeners=1>

Design Decisions
----------------
- **Lazy per-instance emitter**: a non-data descriptor creates the Emitter on
  first access and caches it in the instance ``__dict__`` under the same
  name, so later lookups bypass the descriptor. Host classes must therefore
  have an instance ``__dict__``.
- **No overriding**: any selected name (or the property name) already present
  on the class, including inherited members, is a configuration error.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional, Sequence, TypeVar

from asyncemit.core.event.emitter import Emitter
from asyncemit.core.event.validation import raise_validation_error, resolve_method_names
from asyncemit.core.exceptions import EmitterConfigurationError
from asyncemit.core.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=type)


class _LazyEmitter:
    """Creates one Emitter per host instance on first attribute access."""

    def __init__(self, attr_name: str) -> None:
        self._attr_name = attr_name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        emitter = Emitter()
        instance.__dict__[self._attr_name] = emitter
        return emitter


def _forwarder(property_name: str, method_name: str) -> Callable[..., Any]:
    @functools.wraps(getattr(Emitter, method_name))
    def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
        return getattr(getattr(self, property_name), method_name)(*args, **kwargs)

    return forward


def mixin(
    property_name: str, method_names: Optional[Sequence[str]] = None
) -> Callable[[T], T]:
    """
    Build a class decorator adding emitter capability.

    Parameters
    ----------
    property_name:
        Attribute under which each host instance exposes its own Emitter.
    method_names:
        Operations to forward from the host class. Defaults to every public
        operation.

    Returns
    -------
    Callable[[type], type]:
        Decorator that mutates and returns the host class.

    Raises
    ------
    EmitterValidationError:
        If property_name is not a string, method_names is malformed, or the
        decorated object is not a class.
    EmitterConfigurationError:
        If a method name is unknown, or a selected name or property_name
        already exists on the class.
    """
    if not isinstance(property_name, str):
        raise_validation_error(
            "property_name", property_name, "property_name must be a string"
        )
    names = resolve_method_names(method_names)

    def decorator(target: T) -> T:
        if not isinstance(target, type):
            raise_validation_error("target", target, "target must be a class")

        for name in names:
            if getattr(target, name, None) is not None:
                raise EmitterConfigurationError(
                    name, f"field {name} already exists on {target.__name__}"
                )
        if hasattr(target, property_name):
            raise EmitterConfigurationError(
                property_name,
                f"field {property_name} already exists on {target.__name__}",
            )

        setattr(target, property_name, _LazyEmitter(property_name))
        for name in names:
            setattr(target, name, _forwarder(property_name, name))

        logger.debug(
            "Emitter: mixin applied",
            extra={
                "target": target.__qualname__,
                "property_name": property_name,
                "methods": list(names),
            },
        )
        return target

    return decorator
