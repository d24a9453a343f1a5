"""Observability module (structured logging)."""

from __future__ import annotations

from selectpdf.observability.logging import (
    LogFormat,
    LogLevel,
    configure_logging,
    generate_operation_id,
    get_logger,
    get_operation_id,
    operation_context,
)


__all__ = [
    "LogFormat",
    "LogLevel",
    "configure_logging",
    "generate_operation_id",
    "get_logger",
    "get_operation_id",
    "operation_context",
]
