"""TableStat structured logging framework.

This package provides structlog-based structured logging for TableStat. All
output is written to stderr; stdout is reserved for the plugin protocol.

Classes:
    StructuredLogger: Main structured logging interface
    PerformanceLogger: Operation timing
    LoggerFactory: Logger creation and configuration

Example:
    >>> from tablestat.logging import get_logger, get_performance_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Collection started", database="app")
    >>>
    >>> perf_logger = get_performance_logger("connector")
    >>> with perf_logger.measure("stat_query"):
    ...     pass
"""

from .factory import (
    LoggerFactory,
    LoggerSettings,
    configure_logging,
    get_factory,
    get_logger,
    get_performance_logger,
    shutdown_logging,
)
from .formatters import get_formatter, json_formatter, text_formatter
from .handlers import ConsoleHandler
from .performance import PerformanceLogger, TimingContext, TimingMetrics
from .structured import StructuredLogger

__all__ = [
    # Factory and configuration
    "LoggerFactory",
    "LoggerSettings",
    "configure_logging",
    "get_factory",
    "get_logger",
    "get_performance_logger",
    "shutdown_logging",

    # Formatters and handlers
    "get_formatter",
    "json_formatter",
    "text_formatter",
    "ConsoleHandler",

    # Performance logging
    "PerformanceLogger",
    "TimingContext",
    "TimingMetrics",

    # Structured logging
    "StructuredLogger",
]
