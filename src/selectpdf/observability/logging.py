"""Structured logging configuration for the SelectPdf client.

Logging goes through structlog. Library code only obtains loggers with
:func:`get_logger`; applications (such as the ``selectpdf`` CLI) call
:func:`configure_logging` once at startup. Supported output:

- Colorized console output for interactive terminals
- Logfmt output for log collectors
- JSON lines
- Operation ids tracked via contextvars, so every request and poll made
  for one conversion can be correlated
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog
from structlog.contextvars import (
    bind_contextvars,
    merge_contextvars,
    unbind_contextvars,
)
from structlog.processors import TimeStamper, add_log_level


if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.typing import EventDict, WrappedLogger

__all__ = [
    "LogFormat",
    "LogLevel",
    "configure_logging",
    "generate_operation_id",
    "get_logger",
    "get_operation_id",
    "operation_context",
]


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_stdlib_level(self) -> int:
        """Convert to the stdlib logging level constant."""
        level: int = getattr(logging, self.name)
        return level


class LogFormat(StrEnum):
    """Log output format.

    Attributes:
        AUTO: Console output on a TTY, logfmt otherwise.
        CONSOLE: Human-readable colored output.
        LOGFMT: ``key=value`` lines.
        JSON: One JSON object per line.
    """

    AUTO = "auto"
    CONSOLE = "console"
    LOGFMT = "logfmt"
    JSON = "json"


_operation_id_var: ContextVar[str | None] = ContextVar("operation_id", default=None)


def generate_operation_id() -> str:
    """Generate a short unique operation id (8 hex characters)."""
    return uuid.uuid4().hex[:8]


def get_operation_id() -> str | None:
    """Get the operation id bound to the current context, if any."""
    return _operation_id_var.get()


@contextmanager
def operation_context(
    operation_id: str | None = None,
    **context: object,
) -> Iterator[str]:
    """Bind an operation id and extra context for the duration of a block.

    Args:
        operation_id: Id to bind. A new one is generated if None.
        **context: Extra key-value pairs added to every log line.

    Yields:
        The bound operation id.

    Example:
        >>> with operation_context(operation="convert_url") as op_id:
        ...     client.convert_url("https://example.com")
    """
    if operation_id is None:
        operation_id = generate_operation_id()

    token = _operation_id_var.set(operation_id)
    bind_contextvars(operation_id=operation_id, **context)
    try:
        yield operation_id
    finally:
        unbind_contextvars("operation_id", *context)
        _operation_id_var.reset(token)


def add_operation_id(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Processor adding the current operation id when it is not already set."""
    del logger, method_name
    if "operation_id" not in event_dict:
        operation_id = get_operation_id()
        if operation_id is not None:
            event_dict["operation_id"] = operation_id
    return event_dict


def _resolve_format(log_format: LogFormat) -> LogFormat:
    if log_format is not LogFormat.AUTO:
        return log_format
    is_tty = sys.stderr is not None and hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    return LogFormat.CONSOLE if is_tty else LogFormat.LOGFMT


def _create_renderer(log_format: LogFormat) -> structlog.typing.Processor:
    if log_format is LogFormat.CONSOLE:
        return structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )
    if log_format is LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    return structlog.processors.LogfmtRenderer(
        key_order=["timestamp", "level", "event", "operation_id"],
        drop_missing=True,
        bool_as_flag=False,
    )


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    *,
    log_format: LogFormat | str = LogFormat.AUTO,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level, as a LogLevel or its name in any case.
        log_format: Output format. ``auto`` picks console output when
            stderr is a TTY and logfmt otherwise.

    Raises:
        ValueError: If the level or format is not recognized.
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    processors: list[structlog.typing.Processor] = [
        merge_contextvars,
        add_operation_id,
        add_log_level,
        TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    resolved = _resolve_format(log_format)
    if resolved is LogFormat.JSON:
        processors.append(structlog.processors.format_exc_info)
    processors.append(_create_renderer(resolved))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level.to_stdlib_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # httpx logs through the stdlib logging module
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=max(level.to_stdlib_level(), logging.WARNING),
        force=True,
    )


def get_logger(
    name: str | None = None,
    **initial_context: object,
) -> structlog.typing.FilteringBoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name, typically ``__name__``.
        **initial_context: Key-value pairs bound to every event.

    Returns:
        A structlog logger.
    """
    log: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    if initial_context:
        log = log.bind(**initial_context)
    return log
