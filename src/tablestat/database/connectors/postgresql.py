# src/tablestat/database/connectors/postgresql.py
"""PostgreSQL table statistics connector."""

import asyncio
from typing import AsyncIterator, Optional
from urllib.parse import quote, urlencode

import asyncpg

from tablestat.config.models import ConnectionConfig
from tablestat.core import AsyncComponent
from tablestat.core.exceptions import (
    DatabaseConnectionError,
    ErrorCodes,
    QueryError,
)
from tablestat.database.models import StatRow
from tablestat.logging import get_logger, get_performance_logger

STAT_QUERY = "SELECT * FROM pg_stat_user_tables"


def build_dsn(config: ConnectionConfig) -> str:
    """Assemble a ``postgresql://`` DSN from the connection configuration.

    Host, port, user, database and sslmode are always rendered, even when
    empty. The password is rendered only when one is configured. A host
    starting with ``/`` is a Unix socket directory and is passed as the
    ``host`` query parameter.
    """
    userinfo = quote(config.user, safe="")
    password = config.password.get_secret_value()
    if password:
        userinfo += ":" + quote(password, safe="")

    params = {"sslmode": config.sslmode}
    host = config.host
    if host.startswith("/"):
        params["host"] = host
        host = ""
    elif ":" in host:
        host = f"[{host}]"

    return (
        f"postgresql://{userinfo}@{host}:{config.port}/"
        f"{quote(config.database, safe='')}?{urlencode(params)}"
    )


def build_query(option: str) -> str:
    """Return the statistics query with the caller-supplied suffix appended.

    The suffix is appended verbatim after exactly one space; it is neither
    validated nor escaped.
    """
    if option:
        return f"{STAT_QUERY} {option}"
    return STAT_QUERY


class PostgreSQLStatsConnector(AsyncComponent[ConnectionConfig]):
    """Streams ``pg_stat_user_tables`` rows over a single connection.

    Each call to :meth:`iter_stat_rows` opens one connection, runs the
    statistics query through a server-side cursor and closes the
    connection again, whether the query succeeds or not.
    """

    component_name = "PostgreSQLStatsConnector"
    platform = "postgresql"

    def __init__(self, config: ConnectionConfig):
        super().__init__(config)
        self.logger = get_logger("tablestat.connector.postgresql").bind(
            host=config.host,
            port=config.port,
            database=config.database,
        )
        self.perf_logger = get_performance_logger("connector.postgresql")
        self._connection: Optional[asyncpg.Connection] = None

    @property
    def is_connected(self) -> bool:
        return self.is_initialized and self._connection is not None

    async def _async_initialize(self) -> None:
        """Open the database connection."""
        context = {
            "dsn": self.config.safe_dsn,
            "connect_timeout": self.config.connect_timeout,
        }
        self.logger.debug("Connecting to PostgreSQL", sslmode=self.config.sslmode)

        try:
            with self.perf_logger.measure("connect"):
                self._connection = await asyncpg.connect(
                    dsn=build_dsn(self.config),
                    timeout=self.config.connect_timeout,
                )
        except asyncpg.InvalidAuthorizationSpecificationError as e:
            raise DatabaseConnectionError(
                f"PostgreSQL authentication failed: {e}",
                code=ErrorCodes.AUTH_FAILED,
                context=context,
                cause=e,
            ) from e
        except asyncio.TimeoutError as e:
            raise DatabaseConnectionError(
                f"PostgreSQL connection timed out after {self.config.connect_timeout}s",
                code=ErrorCodes.CONNECTION_TIMEOUT,
                context=context,
                cause=e,
            ) from e
        except (OSError, ValueError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            raise DatabaseConnectionError(
                f"Failed to connect to PostgreSQL: {e}",
                code=ErrorCodes.CONNECTION_REFUSED,
                context=context,
                cause=e,
            ) from e

        self.logger.debug("PostgreSQL connection established")

    async def _async_cleanup(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            try:
                await self._connection.close()
            finally:
                self._connection = None
            self.logger.debug("PostgreSQL connection closed")

    async def iter_stat_rows(self) -> AsyncIterator[StatRow]:
        """Yield one :class:`StatRow` per relation, streaming from the server.

        Raises:
            DatabaseConnectionError: If the connection cannot be established
            QueryError: If the query or a row fetch fails
        """
        query = build_query(self.config.option)
        context = {"query": query, "query_timeout": self.config.query_timeout}
        row_count = 0

        async with self:
            try:
                # Timed from query start to the last row handed to the consumer.
                with self.perf_logger.measure("stat_query_stream"):
                    async with self._connection.transaction(readonly=True):
                        cursor = self._connection.cursor(
                            query, timeout=self.config.query_timeout
                        )
                        async for record in cursor:
                            row_count += 1
                            yield StatRow.from_mapping(record)
            except asyncpg.InsufficientPrivilegeError as e:
                raise QueryError(
                    f"Insufficient privileges: {e}",
                    code=ErrorCodes.INSUFFICIENT_PERMISSIONS,
                    context=context,
                    cause=e,
                ) from e
            except asyncio.TimeoutError as e:
                raise QueryError(
                    f"Statistics query timed out after {self.config.query_timeout}s",
                    code=ErrorCodes.QUERY_TIMEOUT,
                    context=context,
                    cause=e,
                ) from e
            except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
                raise QueryError(
                    f"Statistics query failed: {e}",
                    code=ErrorCodes.QUERY_EXECUTION_FAILED,
                    context=context,
                    cause=e,
                ) from e

        self.logger.info("Statistics query completed", rows=row_count)

    def get_connection_info(self) -> dict:
        """Get connection information for diagnostics."""
        return {
            "platform": self.platform,
            "dsn": self.config.safe_dsn,
            "connected": self.is_connected,
        }
