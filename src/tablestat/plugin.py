"""Table statistics plugin.

:class:`PostgresTablePlugin` is the surface the plugin runtime talks to:
the metric key prefix, the static graph definitions and one metric map per
invocation.

Example:
    >>> plugin = PostgresTablePlugin(ConnectionConfig(database="app"))
    >>> plugin.metric_key_prefix()
    'postgres'
    >>> metrics = await plugin.fetch_metrics()
"""

from typing import Callable, Dict

from .config.models import ConnectionConfig
from .database.connectors.postgresql import PostgreSQLStatsConnector
from .logging import get_logger
from .metrics.graphs import GraphDef, graph_definition
from .metrics.normalizer import MetricMap, MetricNormalizer

ConnectorFactory = Callable[[ConnectionConfig], PostgreSQLStatsConnector]


class PostgresTablePlugin:
    """Collects ``pg_stat_user_tables`` as a flat metric map.

    Attributes:
        config: Resolved connection configuration
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        connector_factory: ConnectorFactory = PostgreSQLStatsConnector,
    ) -> None:
        self.config = config
        self._connector_factory = connector_factory
        self.logger = get_logger("tablestat.plugin").bind(prefix=config.prefix)

    def metric_key_prefix(self) -> str:
        return self.config.prefix

    def graph_definition(self) -> Dict[str, GraphDef]:
        return graph_definition(self.metric_key_prefix())

    async def fetch_metrics(self) -> MetricMap:
        """Run the statistics query once and return the flat metric map.

        Returns:
            Mapping of ``table.<group>.<relation>.<field>`` to value

        Raises:
            DatabaseConnectionError: If the connection fails
            QueryError: If the query or a row fetch fails
        """
        normalizer = MetricNormalizer()
        connector = self._connector_factory(self.config)
        await normalizer.consume(connector.iter_stat_rows())

        metrics = normalizer.flatten()
        self.logger.info(
            "Metrics collected",
            relations=normalizer.relation_count,
            metrics=len(metrics),
        )
        return metrics
