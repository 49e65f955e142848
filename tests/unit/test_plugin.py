"""Tests for the table statistics plugin facade."""

import pytest

from tablestat.config.models import ConnectionConfig
from tablestat.core.exceptions import ErrorCodes, QueryError
from tablestat.core.protocols import MetricSource
from tablestat.database.models import StatRow
from tablestat.plugin import PostgresTablePlugin


class FakeConnector:
    """Connector double yielding fixed rows, optionally failing midway."""

    instances = []

    def __init__(self, config, rows=(), error=None):
        self.config = config
        self.rows = list(rows)
        self.error = error
        FakeConnector.instances.append(self)

    async def iter_stat_rows(self):
        for row in self.rows:
            yield row
        if self.error is not None:
            raise self.error


def factory(rows=(), error=None):
    return lambda config: FakeConnector(config, rows, error)


class TestPostgresTablePlugin:

    def test_is_metric_source(self):
        assert isinstance(PostgresTablePlugin(ConnectionConfig()), MetricSource)

    def test_metric_key_prefix(self):
        assert PostgresTablePlugin(ConnectionConfig()).metric_key_prefix() == "postgres"
        assert PostgresTablePlugin(ConnectionConfig(prefix="")).metric_key_prefix() == "postgres"
        assert PostgresTablePlugin(ConnectionConfig(prefix="app")).metric_key_prefix() == "app"

    def test_graph_definition_follows_prefix(self):
        graphs = PostgresTablePlugin(ConnectionConfig(prefix="app")).graph_definition()

        assert graphs["table.row.#"].label == "App Table Rows"

    @pytest.mark.asyncio
    async def test_fetch_metrics(self, sample_record):
        plugin = PostgresTablePlugin(
            ConnectionConfig(),
            connector_factory=factory([StatRow.from_mapping(sample_record)]),
        )

        metrics = await plugin.fetch_metrics()

        assert len(metrics) == 14
        assert metrics["table.scan.orders.seq_scan"] == 5.0
        assert metrics["table.scan.orders.idx_scan"] == 0.0

    @pytest.mark.asyncio
    async def test_fetch_metrics_empty(self):
        plugin = PostgresTablePlugin(ConnectionConfig(), connector_factory=factory())

        assert await plugin.fetch_metrics() == {}

    @pytest.mark.asyncio
    async def test_failure_returns_no_partial_map(self):
        error = QueryError("lost", code=ErrorCodes.QUERY_EXECUTION_FAILED)
        plugin = PostgresTablePlugin(
            ConnectionConfig(),
            connector_factory=factory([StatRow(relname="a")], error=error),
        )

        with pytest.raises(QueryError) as exc_info:
            await plugin.fetch_metrics()

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_fresh_connector_per_fetch(self):
        config = ConnectionConfig(database="app")
        FakeConnector.instances.clear()
        plugin = PostgresTablePlugin(config, connector_factory=factory())

        await plugin.fetch_metrics()
        await plugin.fetch_metrics()

        assert len(FakeConnector.instances) == 2
        assert all(connector.config is config for connector in FakeConnector.instances)
