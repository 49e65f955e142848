"""TableStat exception hierarchy.

This module defines the exception hierarchy for TableStat operations,
providing structured error handling with context and error codes so that the
plugin runtime can report a failed collection without inspecting driver
internals.

Classes:
    TableStatException: Base exception for all TableStat operations
    ConfigurationError: Configuration related errors
    ConnectionError: Database connection errors
    QueryError: Statistics query errors

Example:
    >>> try:
    ...     metrics = await plugin.fetch_metrics()
    ... except DatabaseConnectionError as e:
    ...     logger.error("Connection failed", error_code=e.code, context=e.context)
"""

from typing import Any, Dict, Optional


class TableStatException(Exception):
    """Base exception for all TableStat operations.

    Attributes:
        code: Unique error code for categorization
        context: Additional context information about the error
        cause: Original exception that caused this error (if any)

    Example:
        >>> raise TableStatException(
        ...     "Collection failed",
        ...     code="COLLECTION_FAILED",
        ...     context={"database": "app"}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """Initialize TableStat exception.

        Args:
            message: Human-readable error description
            code: Unique error code for categorization (defaults to class name)
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.code: str = code or self.__class__.__name__
        self.context: Dict[str, Any] = context or {}
        self.cause: Optional[Exception] = cause

    def __str__(self) -> str:
        """Return formatted error message with code."""
        return f"{self.code}: {super().__str__()}"

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return (
            f"{self.__class__.__name__}("
            f"message={super().__str__()!r}, "
            f"code={self.code!r}, "
            f"context={self.context!r}, "
            f"cause={self.cause!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "message": str(super().__str__()),
            "code": self.code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(TableStatException):
    """Configuration related errors.

    Raised when configuration is invalid, missing, or cannot be loaded from
    a configuration file.
    """
    pass


class ValidationError(ConfigurationError):
    """Configuration value validation errors."""
    pass


class ConnectionError(TableStatException):
    """Database connection related errors.

    Base class for failures to assemble a DSN, reach the server,
    authenticate, or connect within the configured timeout.
    """
    pass


class DatabaseConnectionError(ConnectionError):
    """Database connection establishment errors."""
    pass


class QueryError(TableStatException):
    """Statistics query errors.

    Raised when the statistics query or a row fetch fails, including
    malformed query suffixes and permission errors.
    """
    pass


class OutputError(TableStatException):
    """Plugin output or state file errors."""
    pass


class ErrorCodes:
    """Common error codes for TableStat exceptions."""

    # Configuration errors
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_VALIDATION_FAILED = "CONFIG_VALIDATION_FAILED"

    # Connection errors
    CONNECTION_TIMEOUT = "CONNECTION_TIMEOUT"
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    AUTH_FAILED = "AUTH_FAILED"

    # Query errors
    QUERY_EXECUTION_FAILED = "QUERY_EXECUTION_FAILED"
    QUERY_TIMEOUT = "QUERY_TIMEOUT"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Runtime errors
    STATE_FILE_FAILED = "STATE_FILE_FAILED"
    OUTPUT_FAILED = "OUTPUT_FAILED"
