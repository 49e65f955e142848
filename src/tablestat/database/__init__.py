"""
TableStat database layer.

This package owns the single statistics query: DSN assembly, the
``pg_stat_user_tables`` query with an optional verbatim suffix, and the
lenient mapping of result columns onto :class:`StatRow`.

Supported Platforms:
- PostgreSQL (asyncpg)
"""

from .models import STAT_COLUMNS, StatRow
from .connectors import (
    STAT_QUERY,
    PostgreSQLStatsConnector,
    build_dsn,
    build_query,
)

__all__ = [
    # Models
    "STAT_COLUMNS",
    "StatRow",

    # Connectors
    "PostgreSQLStatsConnector",
    "STAT_QUERY",
    "build_dsn",
    "build_query",
]
