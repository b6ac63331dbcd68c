"""
asyncemit Logging Subsystem

Purpose
-------
Structured logging for the emitter and, when the host opts in, for the whole
program around it:

- Module loggers via get_logger(); every emitter module logs at debug level.
- A ContextVar-backed log context. Each emission scopes one, so any line a
  listener logs carries the event name, emission mode and payload type.
- JSON records for aggregation, colored text for local terminals.
- Opt-in output pipeline: a bounded QueueHandler on the root logger feeding a
  QueueListener thread that owns the real (console / file) handlers.

Design Decisions
----------------
- Nothing is configured on import. setup_logging() is idempotent and
  shutdown_logging() undoes it.
- Settings are read from Config when setup_logging() runs, so Config.reload()
  followed by a fresh setup picks up new values.
- ContextFilter sits on the queue handler, so context is captured on the
  emitting task and not on the listener thread.

Dependencies
------------
- asyncemit.core.config.Config
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from asyncemit.core.config.config import Config


# ============================================================================
# Log Context (ContextVars)
# ============================================================================

_log_context: ContextVar[Dict[str, Any]] = ContextVar("asyncemit_log_context", default={})

# Fields copied from the log context onto every record that passes the filter.
CONTEXT_FIELDS = ("correlation_id", "component", "operation", "event_name", "payload_type")


class LogContext:
    """
    Scoped log context; usable with `with` and `async with`.

    Values are merged over the enclosing context and restored on exit.

    Examples
    --------
    >>> with LogContext(component="billing", operation="charge"):
    ...     logger.info("charging")  # carries component/operation
    """

    def __init__(
        self,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.context: Dict[str, Any] = {
            **_log_context.get(),
            "component": component,
            "operation": operation or "N/A",
            "correlation_id": correlation_id or uuid.uuid4().hex[:8],
            **extra,
        }
        self._token: Optional[Token[Dict[str, Any]]] = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def set_log_context(
    component: Optional[str] = None,
    operation: Optional[str] = None,
    correlation_id: Optional[str] = None,
    **extra: Any,
) -> None:
    """Update the current context in place (no automatic restore)."""
    updates = {
        "component": component,
        "operation": operation,
        "correlation_id": correlation_id or None,
        **extra,
    }
    current = dict(_log_context.get())
    current.update({key: value for key, value in updates.items() if value is not None})
    _log_context.set(current)


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get())


def clear_log_context() -> None:
    _log_context.set({})


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


# ============================================================================
# Settings
# ============================================================================


@dataclass(frozen=True)
class LogSettings:
    """Logging settings resolved from Config at setup time."""

    level: int
    use_json: bool
    use_colors: bool
    use_file: bool
    logs_dir: Path
    queue_size: int
    environment: str

    CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
    FILE_NAME = "asyncemit.json.log"

    @classmethod
    def from_config(cls) -> "LogSettings":
        production = Config.is_production()
        use_json = production if Config.LOG_JSON is None else bool(Config.LOG_JSON)
        return cls(
            level=logging.getLevelName(Config.LOG_LEVEL),
            use_json=use_json,
            use_colors=(
                not use_json and bool(Config.LOG_COLORS) and sys.stdout.isatty()
            ),
            use_file=bool(Config.LOG_FILE),
            logs_dir=Path(Config.LOGS_DIR).resolve(),
            queue_size=int(Config.LOG_QUEUE_SIZE),
            environment=Config.ENVIRONMENT,
        )


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    """Copy CONTEXT_FIELDS from the current log context onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context = _log_context.get()
        for name in CONTEXT_FIELDS:
            setattr(record, name, context.get(name) or "N/A")
        if record.component == "N/A":
            record.component = record.name.partition(".")[0]
        return True


class ColoredFormatter(logging.Formatter):
    """Console text with the level name colored by severity."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[90m",
        logging.INFO: "\033[94m",
        logging.WARNING: "\033[93m",
        logging.ERROR: "\033[91m",
        logging.CRITICAL: "\033[1;91m",
    }
    RESET = "\033[0m"

    def formatMessage(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().formatMessage(record)
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().formatMessage(tinted)


# Attributes every LogRecord has; anything else on a record came from `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Context fields are top-level keys (omitted when "N/A"); values passed via
    ``extra=`` are nested under ``"extra"``. Values json cannot encode are
    rendered with repr().
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        data.update(
            (name, getattr(record, name))
            for name in CONTEXT_FIELDS
            if getattr(record, name, "N/A") not in (None, "N/A")
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in CONTEXT_FIELDS
            and not key.startswith("_")
        }
        if extra:
            data["extra"] = extra

        return json.dumps(data, ensure_ascii=False, default=repr)


# ============================================================================
# Queue Pipeline
# ============================================================================


@dataclass(frozen=True)
class LoggingHealth:
    initialized: bool
    queue_size: int
    queue_max_size: int
    records_enqueued: int
    records_dropped: int


@dataclass
class _PipelineState:
    log_queue: Optional["queue.Queue[logging.LogRecord]"] = None
    listener: Optional[QueueListener] = None
    handler: Optional[QueueHandler] = None
    records_enqueued: int = 0
    records_dropped: int = 0
    saved_level: int = logging.WARNING
    extra_handlers: list = field(default_factory=list)


_state = _PipelineState()


class BoundedQueueHandler(QueueHandler):
    """QueueHandler that drops (and counts) records when the queue is full."""

    def enqueue(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            _state.records_dropped += 1
            sys.stderr.write("asyncemit logging queue full; dropping log record.\n")
        else:
            _state.records_enqueued += 1


def _build_handlers(settings: LogSettings) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    if settings.use_json:
        console.setFormatter(JSONFormatter())
    else:
        formatter_cls = ColoredFormatter if settings.use_colors else logging.Formatter
        console.setFormatter(
            formatter_cls(fmt=settings.CONSOLE_FORMAT, datefmt=settings.DATE_FORMAT)
        )
    handlers: list[logging.Handler] = [console]

    if settings.use_file:
        settings.logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=str(settings.logs_dir / settings.FILE_NAME),
            when="midnight",
            backupCount=1,
            encoding="utf-8",
            utc=True,
        )
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(settings.level)
    return handlers


def setup_logging() -> None:
    """
    Route the root logger through a bounded queue to console/file handlers.

    Replaces existing root handlers for the lifetime of the pipeline; they
    are restored by shutdown_logging(). Calling it again is a no-op.
    """
    if _state.listener is not None:
        return

    settings = LogSettings.from_config()
    root = logging.getLogger()

    _state.records_enqueued = 0
    _state.records_dropped = 0
    _state.saved_level = root.level
    _state.extra_handlers = list(root.handlers)
    for handler in _state.extra_handlers:
        root.removeHandler(handler)

    _state.log_queue = queue.Queue(settings.queue_size)
    _state.listener = QueueListener(
        _state.log_queue, *_build_handlers(settings), respect_handler_level=True
    )
    _state.listener.start()

    _state.handler = BoundedQueueHandler(_state.log_queue)
    _state.handler.setLevel(settings.level)
    _state.handler.addFilter(ContextFilter())
    root.addHandler(_state.handler)
    root.setLevel(settings.level)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    get_logger(__name__).info(
        "Logging initialized",
        extra={
            "environment": settings.environment,
            "log_level": logging.getLevelName(settings.level),
            "json": settings.use_json,
            "colors": settings.use_colors,
            "file": settings.use_file,
            "queue_max_size": settings.queue_size,
        },
    )


def shutdown_logging() -> None:
    """Drain the queue, close the pipeline handlers and restore the root logger."""
    if _state.listener is None:
        return

    root = logging.getLogger()
    get_logger(__name__).info("Shutting down logging subsystem.")

    root.removeHandler(_state.handler)
    _state.listener.stop()
    for handler in _state.listener.handlers:
        handler.close()

    for handler in _state.extra_handlers:
        root.addHandler(handler)
    root.setLevel(_state.saved_level)

    _state.listener = None
    _state.handler = None
    _state.log_queue = None
    _state.extra_handlers = []


def get_logging_health() -> LoggingHealth:
    log_queue = _state.log_queue
    return LoggingHealth(
        initialized=_state.listener is not None,
        queue_size=log_queue.qsize() if log_queue is not None else 0,
        queue_max_size=log_queue.maxsize if log_queue is not None else 0,
        records_enqueued=_state.records_enqueued,
        records_dropped=_state.records_dropped,
    )
