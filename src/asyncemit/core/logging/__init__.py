"""
asyncemit Logging Infrastructure

Exports the structured logging subsystem, log context helpers,
and setup/teardown for hosts that want asyncemit to own the root logger.
"""

from asyncemit.core.logging.logger import (
    LogContext,
    LogSettings,
    clear_log_context,
    get_log_context,
    get_logger,
    get_logging_health,
    set_log_context,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "get_logging_health",
    "LogContext",
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    "LogSettings",
]
