"""TableStat configuration management.

This package provides type-safe configuration models with validation,
environment variable interpolation and YAML file support.

Classes:
    BaseConfig: Base configuration class
    ConnectionConfig: Database connection and collection configuration
    LoggingConfig: Logging configuration

Example:
    >>> from tablestat.config import ConnectionConfig
    >>> config = ConnectionConfig.from_sources("tablestat.yaml", port=5433)
"""

from .models import (
    DEFAULT_PREFIX,
    PASSWORD_ENV_VAR,
    BaseConfig,
    ConnectionConfig,
    LoggingConfig,
)

__all__ = [
    "DEFAULT_PREFIX",
    "PASSWORD_ENV_VAR",
    "BaseConfig",
    "ConnectionConfig",
    "LoggingConfig",
]
