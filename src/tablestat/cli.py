"""Command line entry point.

Runs one plugin invocation: resolve configuration, collect
``pg_stat_user_tables`` and write the plugin protocol to stdout. Logs go to
stderr.

Example:
    $ tablestat --host db1 --database app --metric-key-prefix app-db
    $ MACKEREL_AGENT_PLUGIN_META=1 tablestat --metric-key-prefix app-db
"""

import argparse
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, get_args

from .config.models import (
    DEFAULT_PREFIX,
    PASSWORD_ENV_VAR,
    ConnectionConfig,
    LoggingConfig,
    SSLMode,
)
from .core.exceptions import ConfigurationError, ErrorCodes, TableStatException
from .logging import configure_logging, get_factory, get_logger, shutdown_logging
from .plugin import PostgresTablePlugin
from .runtime import FileSnapshotStore, PluginEmitter, PluginRunner, default_snapshot_path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")
SSL_MODES = get_args(SSLMode)

# argparse destination -> ConnectionConfig field
CONNECTION_FLAGS = {
    "host": "host",
    "port": "port",
    "user": "user",
    "password": "password",
    "database": "database",
    "option": "option",
    "sslmode": "sslmode",
    "connect_timeout": "connect_timeout",
    "query_timeout": "query_timeout",
    "metric_key_prefix": "prefix",
}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Flags default to None so that values from ``--config`` are only
    overridden by flags given explicitly.
    """
    parser = argparse.ArgumentParser(
        prog="tablestat",
        description="Report pg_stat_user_tables statistics as agent plugin metrics",
    )

    conn = parser.add_argument_group("connection")
    conn.add_argument("--host", help="Hostname or socket directory (default: localhost)")
    conn.add_argument("--port", type=int, help="Port (default: 5432)")
    conn.add_argument("--user", help="Username (default: postgres)")
    conn.add_argument("--password", help=f"Password (default: ${PASSWORD_ENV_VAR})")
    conn.add_argument("--database", help="Database name (default: server default)")
    conn.add_argument("--option", help="Suffix appended to the statistics query")
    conn.add_argument("--sslmode", choices=SSL_MODES, help="SSL mode (default: disable)")
    conn.add_argument(
        "--connect-timeout", type=int,
        help="Maximum wait for connection, in seconds (default: 5)",
    )
    conn.add_argument(
        "--query-timeout", type=float,
        help="Maximum wait for the statistics query, in seconds (default: none)",
    )

    plugin = parser.add_argument_group("plugin")
    plugin.add_argument(
        "--metric-key-prefix",
        help=f"Metric key prefix (default: {DEFAULT_PREFIX})",
    )
    plugin.add_argument("--tempfile", type=Path, help="State file for counter values")
    plugin.add_argument("--config", type=Path, help="YAML configuration file")

    logs = parser.add_argument_group("logging")
    logs.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="(default: WARNING)")
    logs.add_argument("--log-format", choices=LOG_FORMATS, help="(default: text)")

    return parser


def _explicit(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def load_settings(args: argparse.Namespace) -> Tuple[ConnectionConfig, LoggingConfig]:
    """Resolve connection and logging configuration from file and flags.

    The configuration file holds connection fields at the top level and an
    optional ``logging`` mapping.

    Raises:
        ConfigurationError: If the file cannot be loaded
        ValidationError: If the resolved values are invalid
    """
    data: Dict[str, Any] = ConnectionConfig.load_file(args.config) if args.config else {}
    logging_data = data.pop("logging", None) or {}
    if not isinstance(logging_data, dict):
        raise ConfigurationError(
            "The logging section must be a mapping",
            code=ErrorCodes.CONFIG_INVALID,
            context={"path": str(args.config)},
        )

    flags = vars(args)
    data.update(_explicit({field: flags[dest] for dest, field in CONNECTION_FLAGS.items()}))
    logging_data.update(_explicit({"level": args.log_level, "format": args.log_format}))

    return (
        ConnectionConfig.from_sources(**data),
        LoggingConfig.from_sources(**logging_data),
    )


async def run_plugin(
    config: ConnectionConfig,
    tempfile: Optional[Path] = None,
    *,
    emitter: Optional[PluginEmitter] = None,
) -> None:
    """Run one plugin invocation with the given configuration."""
    plugin = PostgresTablePlugin(config)
    store = FileSnapshotStore(tempfile or default_snapshot_path(config.prefix))
    await PluginRunner(plugin, store, emitter=emitter).run()


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point.

    Returns:
        0 on success, 1 if the invocation failed
    """
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level or "WARNING", format=args.log_format or "text")
    logger = get_logger("tablestat.cli")

    try:
        config, logging_config = load_settings(args)
        get_factory().configure_from_config(logging_config)
        logger.debug("Configuration resolved", **config.to_dict())

        asyncio.run(run_plugin(config, args.tempfile))
    except TableStatException as e:
        logger.log_failure("Plugin run failed", e)
        return 1
    finally:
        shutdown_logging()

    return 0
