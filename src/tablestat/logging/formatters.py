"""Log formatters for TableStat logging system.

Both formatters are structlog ``ProcessorFormatter`` instances so that events
from structlog loggers and plain stdlib records (for example from asyncpg)
are rendered the same way.

Functions:
    json_formatter: One JSON object per line
    text_formatter: Human-readable key=value lines
    get_formatter: Formatter lookup by name

Example:
    >>> handler.setFormatter(get_formatter("json"))
"""

import logging
from typing import Any, List

import structlog

# Processors applied to records that did not originate from structlog.
FOREIGN_PRE_CHAIN: List[Any] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def json_formatter() -> logging.Formatter:
    """Build a formatter that renders each event as a JSON object."""
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ],
        foreign_pre_chain=FOREIGN_PRE_CHAIN,
    )


def text_formatter(*, colors: bool = False) -> logging.Formatter:
    """Build a formatter that renders human-readable lines.

    Args:
        colors: Enable ANSI colors
    """
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        foreign_pre_chain=FOREIGN_PRE_CHAIN,
    )


def get_formatter(format_type: str, **kwargs: Any) -> logging.Formatter:
    """Get formatter instance by type.

    Args:
        format_type: Formatter type ('json', 'text')
        **kwargs: Additional formatter arguments

    Returns:
        Logging formatter instance

    Raises:
        ValueError: If format_type is not supported
    """
    format_type = format_type.lower()

    if format_type == "json":
        return json_formatter(**kwargs)
    elif format_type == "text":
        return text_formatter(**kwargs)
    else:
        raise ValueError(f"Unsupported formatter type: {format_type}")
