"""
Exception hierarchy for asyncemit.

Purpose
-------
Define the structured exceptions raised by the emitter for caller mistakes:
invalid arguments and misconfigured mixin/bind requests. Listener failures
are never wrapped in these types; they propagate as raised.

Design Notes
------------
- All emitter exceptions inherit from `EmitterException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `severity`: `ErrorSeverity` value for logging
  - `error_code`: short, stable identifier for programmatic use
- `EmitterValidationError` also subclasses `TypeError` so callers can catch
  argument-type mistakes the usual Python way.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class EmitterException(Exception):
    """
    Base exception for all asyncemit errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        error_code: Optional code for programmatic handling

    Example:
        >>> raise EmitterException(
        ...     "Emitter misuse",
        ...     {"event_name": 42},
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}"
            ")"
        )


class EmitterValidationError(EmitterException, TypeError):
    """
    Raised when an argument has the wrong type.

    Raised synchronously, before any registry mutation or suspension, when an
    event name is not a string, a listener is not callable, a count/clear
    argument is neither a string nor None, an allow-list is not a list of
    strings, or a bind target cannot carry attributes.

    Args:
        field_name: Name of the offending argument
        value: The rejected value
        message: Description of the expected type
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO

    def __init__(self, field_name: str, value: Any, message: str) -> None:
        self.field_name = field_name
        super().__init__(
            message,
            details={
                "field_name": field_name,
                "value_type": type(value).__name__,
            },
            error_code="VALIDATION_ERROR",
        )


class EmitterConfigurationError(EmitterException):
    """
    Raised by the mixin and bind-methods helpers.

    Covers unknown operation names in an allow-list and names that collide
    with an existing member of the host class or target object.

    Args:
        method_name: The operation (or property) name at fault
        message: Description of the configuration problem
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR

    def __init__(self, method_name: str, message: str) -> None:
        self.method_name = method_name
        super().__init__(
            message,
            details={"method_name": method_name},
            error_code="CONFIGURATION_ERROR",
        )


__all__ = [
    "ErrorSeverity",
    "EmitterException",
    "EmitterValidationError",
    "EmitterConfigurationError",
]
