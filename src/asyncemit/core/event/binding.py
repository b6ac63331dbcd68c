"""
Bind emitter methods onto an arbitrary object.

Lets a plain object (a service, a namespace, a module-like holder) expose
selected emitter operations as its own attributes without subclassing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence

from asyncemit.core.event.validation import raise_validation_error, resolve_method_names
from asyncemit.core.exceptions import EmitterConfigurationError
from asyncemit.core.logging.logger import get_logger

if TYPE_CHECKING:
    from asyncemit.core.event.emitter import Emitter

logger = get_logger(__name__)

# Values that cannot carry attributes of their own.
_IMMUTABLE_TARGETS = (str, bytes, int, float, complex, tuple, frozenset, type(None))


def bind_emitter_methods(
    emitter: "Emitter",
    target: Any,
    method_names: Optional[Sequence[str]] = None,
) -> None:
    """
    Set bound emitter methods as attributes of ``target``.

    Every name is checked before any attribute is set, so a collision leaves
    ``target`` untouched.

    Parameters
    ----------
    emitter:
        Emitter whose bound methods are copied.
    target:
        Object receiving the attributes.
    method_names:
        Operation names to bind. Defaults to every public operation.

    Raises
    ------
    EmitterValidationError:
        If target is None, an immutable value, or rejects attribute
        assignment, or method_names is malformed.
    EmitterConfigurationError:
        If a name is unknown or target already has a non-None attribute
        of that name.
    """
    if isinstance(target, _IMMUTABLE_TARGETS):
        raise_validation_error("target", target, "target must be an object")

    names = resolve_method_names(method_names)

    for name in names:
        if getattr(target, name, None) is not None:
            raise EmitterConfigurationError(
                name, f"The property `{name}` already exists on `target`"
            )

    for name in names:
        try:
            setattr(target, name, getattr(emitter, name))
        except (AttributeError, TypeError):
            raise_validation_error(
                "target", target, "target must accept attribute assignment"
            )

    logger.debug(
        "Emitter: bound methods onto target",
        extra={"target_type": type(target).__name__, "methods": list(names)},
    )
