"""Logger factory and configuration for TableStat.

This module provides centralized logger creation and configuration of the
structlog/stdlib logging pipeline.

Classes:
    LoggerFactory: Main logger factory and configuration manager
    LoggerSettings: Settings applied by the factory

Functions:
    configure_logging: Configure logging system globally
    get_logger: Convenience function for getting loggers
    get_performance_logger: Convenience function for performance loggers

Example:
    >>> from tablestat.logging import get_logger, configure_logging
    >>> configure_logging(level="INFO", format="json")
    >>> logger = get_logger(__name__)
    >>> logger.info("Collection started", database="app")
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog

from ..config.models import LoggingConfig
from ..core.exceptions import ConfigurationError
from .formatters import get_formatter
from .handlers import ConsoleHandler
from .performance import PerformanceLogger
from .structured import StructuredLogger


@dataclass
class LoggerSettings:
    """Settings applied by the logger factory.

    Attributes:
        level: Log level
        format: Log format (json, text)
        console_output: Enable console (stderr) output
        correlation_ids: Attach a correlation ID to every logger
    """
    level: str = "WARNING"
    format: str = "text"
    console_output: bool = True
    correlation_ids: bool = True


class LoggerFactory:
    """Factory for creating and configuring TableStat loggers.

    Example:
        >>> factory = LoggerFactory()
        >>> factory.configure_from_config(LoggingConfig(level="DEBUG"))
        >>> logger = factory.get_logger("tablestat.connector")
    """

    def __init__(self, settings: Optional[LoggerSettings] = None) -> None:
        self.settings = settings or LoggerSettings()
        self.initialized = False
        self._loggers: Dict[str, StructuredLogger] = {}
        self._performance_loggers: Dict[str, PerformanceLogger] = {}
        self._handler: Optional[logging.Handler] = None

    def configure_from_config(self, logging_config: LoggingConfig) -> None:
        """Configure factory from LoggingConfig instance.

        Args:
            logging_config: Logging configuration
        """
        self.settings = LoggerSettings(
            level=logging_config.level,
            format=logging_config.format,
            console_output=logging_config.console_output,
            correlation_ids=self.settings.correlation_ids,
        )
        self._configure_logging_system(force=True)

    def configure_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Configure factory from dictionary.

        Unknown keys are ignored.

        Args:
            config_dict: Dictionary containing logging configuration
        """
        for key, value in config_dict.items():
            if hasattr(self.settings, key):
                setattr(self.settings, key, value)

        if not hasattr(logging, str(self.settings.level).upper()):
            raise ConfigurationError(f"Invalid log level: {self.settings.level}")

        self._configure_logging_system(force=True)

    def _configure_logging_system(self, *, force: bool = False) -> None:
        if self.initialized and not force:
            return

        self._configure_stdlib_logging()
        self._configure_structlog(force=force)
        self.initialized = True

    def _configure_stdlib_logging(self) -> None:
        """Configure Python standard library logging."""
        level = getattr(logging, self.settings.level.upper(), logging.WARNING)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        if self._handler is not None:
            root_logger.removeHandler(self._handler)
            self._handler = None

        if self.settings.console_output:
            handler = ConsoleHandler()
            handler.setLevel(level)
            if self.settings.format.lower() == "text":
                handler.setFormatter(get_formatter("text", colors=handler.supports_color()))
            else:
                handler.setFormatter(get_formatter(self.settings.format))
            root_logger.addHandler(handler)
            self._handler = handler

    def _configure_structlog(self, *, force: bool = False) -> None:
        """Configure structlog to hand events to stdlib logging.

        A structlog configuration made elsewhere (for instance by a test
        harness) is left alone unless ``force`` is set.
        """
        if structlog.is_configured() and not force:
            return

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=False,
        )

    def get_logger(self, name: str, *, level: Optional[str] = None) -> StructuredLogger:
        """Get or create a structured logger.

        Args:
            name: Logger name (typically module name)
            level: Override the inherited log level

        Returns:
            StructuredLogger instance
        """
        if not self.initialized:
            self._configure_logging_system()

        cache_key = f"{name}_{level}"
        if cache_key not in self._loggers:
            self._loggers[cache_key] = StructuredLogger(
                name=name,
                level=level,
                enable_correlation=self.settings.correlation_ids,
            )
        return self._loggers[cache_key]

    def get_performance_logger(self, name: str, *, auto_log: bool = True) -> PerformanceLogger:
        """Get or create a performance logger.

        Args:
            name: Logger name
            auto_log: Whether to automatically log timing results

        Returns:
            PerformanceLogger instance
        """
        cache_key = f"{name}_{auto_log}"
        if cache_key not in self._performance_loggers:
            self._performance_loggers[cache_key] = PerformanceLogger(
                name=name,
                auto_log=auto_log,
                logger=self.get_logger(f"perf.{name}"),
            )
        return self._performance_loggers[cache_key]

    def shutdown(self) -> None:
        """Detach the factory's handler and clear logger caches."""
        if self._handler is not None:
            logging.getLogger().removeHandler(self._handler)
            self._handler.close()
            self._handler = None

        self._loggers.clear()
        self._performance_loggers.clear()
        self.initialized = False

    def __repr__(self) -> str:
        return (
            f"LoggerFactory("
            f"level={self.settings.level!r}, "
            f"format={self.settings.format!r}, "
            f"initialized={self.initialized})"
        )


# Global logger factory instance
_global_factory = LoggerFactory()


def configure_logging(
    *,
    level: str = "WARNING",
    format: str = "text",
    console_output: bool = True,
    **kwargs: Any
) -> None:
    """Configure TableStat logging system globally.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json, text)
        console_output: Enable console (stderr) output
        **kwargs: Additional settings

    Example:
        >>> configure_logging(level="DEBUG", format="json")
    """
    _global_factory.configure_from_dict({
        "level": level,
        "format": format,
        "console_output": console_output,
        **kwargs
    })


def get_logger(name: str, *, level: Optional[str] = None) -> StructuredLogger:
    """Get or create a structured logger using the global factory.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Plugin started", version="0.1.0")
    """
    return _global_factory.get_logger(name, level=level)


def get_performance_logger(name: str, *, auto_log: bool = True) -> PerformanceLogger:
    """Get or create a performance logger using the global factory.

    Example:
        >>> perf_logger = get_performance_logger("connector")
        >>> with perf_logger.measure("stat_query"):
        ...     ...
    """
    return _global_factory.get_performance_logger(name, auto_log=auto_log)


def get_factory() -> LoggerFactory:
    """Get the global logger factory instance."""
    return _global_factory


def shutdown_logging() -> None:
    """Shutdown the global logging system and clean up resources."""
    _global_factory.shutdown()
