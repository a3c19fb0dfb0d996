"""
Structured logging for logsource.

Provides a pre-configured logger that emits JSON-structured log records
with request context (ref id, operation, resource path) for easy filtering
in log aggregation tools.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

_CONTEXT_KEYS = ("request_id", "ref_id", "operation", "path", "project_id", "error")


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via DatasourceLogger.log_operation
        for key in _CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry, default=str)


class DatasourceLogger:
    """Convenience wrapper around :mod:`logging` for pipeline operations."""

    def __init__(self, name: str = "logsource") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        ref_id: str | None = None,
        operation: str | None = None,
        path: str | None = None,
        project_id: str | None = None,
        error: BaseException | str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with query or resource context.

        Args:
            level: Logging level (e.g. logging.WARNING).
            message: Human-readable message.
            ref_id: Query reference id.
            operation: Operation name (e.g. 'list_buckets').
            path: Resource path being served.
            project_id: GCP project the operation targets.
            error: Underlying error; rendered as text.
            request_id: Optional correlation ID; auto-generated if omitted.
            exc_info: Whether to include exception info.
        """
        extra = {
            "ref_id": ref_id,
            "operation": operation,
            "path": path,
            "project_id": project_id,
            "error": str(error) if error is not None else None,
            "request_id": request_id or uuid.uuid4().hex[:12],
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
ds_logger = DatasourceLogger()
