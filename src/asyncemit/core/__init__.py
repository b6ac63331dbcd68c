"""
Core infrastructure layer for asyncemit.

Purpose
-------
Provide a single import surface for the subsystems the emitter is built on:

- Configuration (Config, Environment)
- Logging (structured logging, logger factory, log context)
- Exceptions (EmitterException hierarchy)

Re-exports only; importing this module configures nothing.
"""

from __future__ import annotations

from asyncemit.core.config import Config, Environment
from asyncemit.core.exceptions import (
    EmitterConfigurationError,
    EmitterException,
    EmitterValidationError,
    ErrorSeverity,
)
from asyncemit.core.logging import (
    LogContext,
    get_logger,
    set_log_context,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "Config",
    "Environment",
    "EmitterException",
    "EmitterValidationError",
    "EmitterConfigurationError",
    "ErrorSeverity",
    "LogContext",
    "get_logger",
    "set_log_context",
    "setup_logging",
    "shutdown_logging",
]
