"""
Argument validation for the emitter.

Every public emitter operation validates its arguments here before touching
the registry or suspending. Failures are logged at debug level and raised as
EmitterValidationError (a TypeError) or EmitterConfigurationError.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional, Sequence

from asyncemit.core.event.types import EMITTER_METHODS
from asyncemit.core.exceptions import (
    EmitterConfigurationError,
    EmitterValidationError,
)
from asyncemit.core.logging.logger import get_logger

logger = get_logger(__name__)


def raise_validation_error(field_name: str, value: Any, message: str) -> NoReturn:
    """Log and raise an EmitterValidationError."""
    logger.debug(
        "Emitter argument validation failed",
        extra={
            "field_name": field_name,
            "raw_value": repr(value),
            "reason": message,
        },
    )
    raise EmitterValidationError(field_name, value, message)


def assert_event_name(event_name: Any) -> str:
    if not isinstance(event_name, str):
        raise_validation_error("event_name", event_name, "event_name must be a string")
    return event_name


def assert_optional_event_name(event_name: Any) -> Optional[str]:
    if event_name is None:
        return None
    return assert_event_name(event_name)


def assert_listener(listener: Any) -> None:
    if not callable(listener):
        raise_validation_error("listener", listener, "listener must be callable")


def resolve_method_names(method_names: Optional[Sequence[str]]) -> tuple[str, ...]:
    """
    Validate an operation allow-list, defaulting to the full surface.

    Parameters
    ----------
    method_names:
        None, or a list/tuple of names drawn from EMITTER_METHODS.

    Returns
    -------
    tuple[str, ...]:
        The selected operation names in the caller's order.

    Raises
    ------
    EmitterValidationError:
        If the allow-list is not a list/tuple, or holds a non-string entry.
    EmitterConfigurationError:
        If a string entry is not a known operation name.
    """
    if method_names is None:
        return EMITTER_METHODS

    if not isinstance(method_names, (list, tuple)):
        raise_validation_error(
            "method_names", method_names, "method_names must be a list of strings"
        )

    for name in method_names:
        if not isinstance(name, str):
            raise_validation_error("method_names", name, "method name must be a string")
        if name not in EMITTER_METHODS:
            raise EmitterConfigurationError(name, f"{name} is not an emitter method")

    return tuple(method_names)
