"""Performance logging for TableStat operations.

This module provides timing for the few expensive steps of a collection run
(connecting, draining the statistics cursor, emitting output).

Classes:
    TimingMetrics: A single timing measurement
    TimingContext: Context manager for operation timing
    PerformanceLogger: Named logger producing timing contexts

Example:
    >>> perf_logger = PerformanceLogger("connector")
    >>> with perf_logger.measure("stat_query") as timer:
    ...     rows = [row async for row in connector.iter_stat_rows()]
    >>> timer.duration_ms
    12.7
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional

from .structured import StructuredLogger


@dataclass
class TimingMetrics:
    """Metrics for a single timing measurement.

    Attributes:
        operation: Operation name
        start_time: Operation start timestamp (perf counter)
        end_time: Operation end timestamp
        duration: Duration in seconds
        metadata: Additional metadata
        success: Whether operation succeeded
        error: Error information if failed
    """
    operation: str
    start_time: float
    end_time: Optional[float] = None
    duration: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error: Optional[str] = None

    def complete(self, success: bool = True, error: Optional[str] = None) -> None:
        """Mark timing as complete.

        Args:
            success: Whether operation succeeded
            error: Error message if failed
        """
        self.end_time = time.perf_counter()
        self.duration = self.end_time - self.start_time
        self.success = success
        self.error = error

    @property
    def duration_ms(self) -> Optional[float]:
        return self.duration * 1000 if self.duration is not None else None

    @property
    def is_complete(self) -> bool:
        return self.end_time is not None


class TimingContext:
    """Context manager for measuring operation timing.

    Example:
        >>> with TimingContext("stat_query") as timer:
        ...     ...
        >>> print(f"Query took {timer.duration_ms:.2f}ms")
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[StructuredLogger] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize timing context.

        Args:
            operation: Operation name
            logger: Logger for automatic logging, or None to stay silent
            metadata: Additional metadata
        """
        self.operation = operation
        self.logger = logger
        self.metadata = metadata or {}
        self._timing: Optional[TimingMetrics] = None

    @property
    def timing(self) -> Optional[TimingMetrics]:
        return self._timing

    @property
    def duration(self) -> Optional[float]:
        return self._timing.duration if self._timing else None

    @property
    def duration_ms(self) -> Optional[float]:
        return self._timing.duration_ms if self._timing else None

    def __enter__(self) -> "TimingContext":
        self._timing = TimingMetrics(
            operation=self.operation,
            start_time=time.perf_counter(),
            metadata=self.metadata,
        )
        if self.logger:
            self.logger.debug("Operation started", operation=self.operation, **self.metadata)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._timing is None:
            return

        success = exc_type is None
        error = str(exc_val) if exc_val else None
        self._timing.complete(success=success, error=error)

        if self.logger:
            if success:
                self.logger.debug(
                    "Operation completed",
                    operation=self.operation,
                    duration_ms=self._timing.duration_ms,
                    **self.metadata
                )
            else:
                self.logger.debug(
                    "Operation failed",
                    operation=self.operation,
                    duration_ms=self._timing.duration_ms,
                    error=error,
                    **self.metadata
                )


class PerformanceLogger:
    """Performance logger recording timings of named operations.

    Attributes:
        name: Logger name
        logger: Underlying structured logger
        timings: Completed timings, in completion order
    """

    def __init__(
        self,
        name: str,
        *,
        auto_log: bool = True,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        """Initialize performance logger.

        Args:
            name: Logger name
            auto_log: Whether to automatically log timing results
            logger: Custom structured logger instance
        """
        self.name = name
        self.auto_log = auto_log
        self.logger = logger or StructuredLogger(f"perf.{name}")
        self.timings: List[TimingMetrics] = []

    @contextmanager
    def measure(self, operation: str, **metadata: Any) -> Generator[TimingContext, None, None]:
        """Context manager for measuring operation performance.

        Args:
            operation: Operation name
            **metadata: Additional metadata

        Yields:
            TimingContext for the operation
        """
        timing_context = TimingContext(
            operation=operation,
            logger=self.logger if self.auto_log else None,
            metadata=metadata,
        )
        try:
            with timing_context as ctx:
                yield ctx
        finally:
            if timing_context.timing is not None:
                self.timings.append(timing_context.timing)

    def last(self, operation: str) -> Optional[TimingMetrics]:
        """Return the most recent completed timing for an operation."""
        for timing in reversed(self.timings):
            if timing.operation == operation:
                return timing
        return None
