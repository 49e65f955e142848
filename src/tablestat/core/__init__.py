"""TableStat core infrastructure.

This package provides the foundational pieces shared by every other TableStat
package: the exception hierarchy and the protocols used at the seams between
the collector and the plugin runtime.

Modules:
    base: Component base classes
    exceptions: Exception hierarchy
    protocols: Collaborator protocols

Example:
    >>> from tablestat.core import QueryError, ErrorCodes
    >>> from tablestat.core.protocols import RateCalculator
"""

from .base import AsyncComponent
from .exceptions import (
    ConfigurationError,
    ConnectionError,
    DatabaseConnectionError,
    ErrorCodes,
    OutputError,
    QueryError,
    TableStatException,
    ValidationError,
)
from .protocols import MetricSource, RateCalculator, SnapshotStore

__all__ = [
    # Base classes
    "AsyncComponent",

    # Exceptions
    "ConfigurationError",
    "ConnectionError",
    "DatabaseConnectionError",
    "ErrorCodes",
    "OutputError",
    "QueryError",
    "TableStatException",
    "ValidationError",

    # Protocols
    "MetricSource",
    "RateCalculator",
    "SnapshotStore",
]
