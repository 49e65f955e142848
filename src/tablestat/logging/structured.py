"""Structured logging implementation for TableStat.

This module provides a thin structured logger on top of structlog with bound
context and a per-invocation correlation ID, so every log line emitted during
one collection run can be tied together.

Classes:
    StructuredLogger: Main structured logging interface

Example:
    >>> logger = StructuredLogger("tablestat.connector")
    >>> with logger.context(database="app", host="db1"):
    ...     logger.info("Statistics query started")
    ...     logger.warning("Relation name escaped", relation="a.b")
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import structlog

from ..core.exceptions import ConfigurationError

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class StructuredLogger:
    """Structured logger with bound context and correlation.

    Attributes:
        name: Logger name

    Example:
        >>> logger = StructuredLogger("tablestat.runner")
        >>> run_logger = logger.bind(prefix="postgres")
        >>> run_logger.info("Metrics emitted", count=42)
    """

    def __init__(
        self,
        name: str,
        *,
        level: Optional[str] = None,
        enable_correlation: bool = True,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize structured logger.

        Args:
            name: Logger name (typically module name)
            level: Initial log level, or None to inherit from the root logger
            enable_correlation: Whether to attach a correlation ID
            context: Initial bound context
        """
        self.name = name
        self._enable_correlation = enable_correlation
        self._context: Dict[str, Any] = dict(context or {})
        self._logger = structlog.get_logger(name)
        self._stdlib_logger = logging.getLogger(name)

        if level is not None:
            self.set_level(level)

        if self._enable_correlation and "correlation_id" not in self._context:
            self._context["correlation_id"] = str(uuid.uuid4())

    def _prepare_event_dict(self, **kwargs: Any) -> Dict[str, Any]:
        event_dict = dict(self._context)
        event_dict.update(kwargs)
        return event_dict

    @contextmanager
    def context(self, **context_data: Any) -> Generator[None, None, None]:
        """Context manager for adding temporary context data.

        Args:
            **context_data: Context data to add temporarily

        Example:
            >>> with logger.context(database="app"):
            ...     logger.info("Connecting")
        """
        old_context = dict(self._context)
        try:
            self._context.update(context_data)
            yield
        finally:
            self._context = old_context

    def bind(self, **context_data: Any) -> "StructuredLogger":
        """Create new logger instance with bound context.

        The correlation ID of this logger is carried over.

        Args:
            **context_data: Context data to bind

        Returns:
            New logger instance with bound context
        """
        merged = dict(self._context)
        merged.update(context_data)
        return StructuredLogger(
            self.name,
            enable_correlation=self._enable_correlation,
            context=merged,
        )

    def set_level(self, level: str) -> None:
        """Set logging level.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

        Raises:
            ConfigurationError: If the level is unknown
        """
        if level.upper() not in _LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {level}",
                code="UNKNOWN_LOG_LEVEL",
            )
        self._stdlib_logger.setLevel(getattr(logging, level.upper()))

    def get_level(self) -> str:
        """Get current effective logging level name."""
        return logging.getLevelName(self._stdlib_logger.getEffectiveLevel())

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, **self._prepare_event_dict(**kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, **self._prepare_event_dict(**kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, **self._prepare_event_dict(**kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, **self._prepare_event_dict(**kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(message, **self._prepare_event_dict(**kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error together with the active exception's traceback."""
        self._logger.error(message, exc_info=True, **self._prepare_event_dict(**kwargs))

    def log_failure(self, message: str, error: Exception, **kwargs: Any) -> None:
        """Log a failure with the error type, code and context flattened in.

        Args:
            message: Log message
            error: Exception that occurred
            **kwargs: Additional structured data
        """
        details: Dict[str, Any] = {
            "error": str(error),
            "error_type": type(error).__name__,
        }
        to_dict = getattr(error, "to_dict", None)
        if callable(to_dict):
            data = to_dict()
            details["error_code"] = data.get("code")
            details["error_context"] = data.get("context")
            details["cause"] = data.get("cause")
        self.error(message, **details, **kwargs)

    @property
    def correlation_id(self) -> Optional[str]:
        return self._context.get("correlation_id")

    def get_context(self) -> Dict[str, Any]:
        """Get current context data."""
        return dict(self._context)

    def __repr__(self) -> str:
        return (
            f"StructuredLogger("
            f"name={self.name!r}, "
            f"level={self.get_level()!r}, "
            f"correlation={self._enable_correlation})"
        )
