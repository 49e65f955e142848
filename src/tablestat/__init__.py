"""TableStat - PostgreSQL table statistics collector for monitoring agents.

TableStat polls ``pg_stat_user_tables`` once per invocation and republishes
every relation's scan, row, vacuum and analyze counters as a flat, namespaced
metric map in the plugin protocol spoken by mackerel-agent style monitoring
agents.

Modules:
    core: Exceptions and collaborator protocols
    config: Configuration models
    logging: Structured logging framework
    database: Statistics connector and row model
    metrics: Metric normalization and graph definitions
    runtime: Rate calculation, snapshots and plugin output

Example:
    Collect one metric map:

    >>> from tablestat.config import ConnectionConfig
    >>> from tablestat.plugin import PostgresTablePlugin
    >>>
    >>> plugin = PostgresTablePlugin(ConnectionConfig(database="app"))
    >>> metrics = await plugin.fetch_metrics()
    >>> metrics["table.scan.orders.seq_scan"]
    5.0
"""

from . import core, config, logging

__version__ = "0.1.0"
__title__ = "TableStat"
__description__ = "PostgreSQL table statistics collector for monitoring agents"
__author__ = "TableStat Team"
__license__ = "MIT"

__all__ = [
    "core",
    "config",
    "logging",
    "__version__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
]
