"""Database connectors."""

from .postgresql import PostgreSQLStatsConnector, STAT_QUERY, build_dsn, build_query

__all__ = [
    "PostgreSQLStatsConnector",
    "STAT_QUERY",
    "build_dsn",
    "build_query",
]
