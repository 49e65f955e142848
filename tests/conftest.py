"""Pytest configuration and shared fixtures.

This module provides pytest configuration and shared fixtures for all tests
in the TableStat test suite.
"""

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import structlog
from pydantic import SecretStr

from tablestat.config.models import ConnectionConfig


def configure_test_logging() -> None:
    """Route structlog events into a capture processor instead of stderr."""
    structlog.configure(
        processors=[structlog.testing.LogCapture()],
        wrapper_class=structlog.BoundLogger,
        logger_factory=structlog.testing.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )


# Configure test logging to suppress noise during tests
configure_test_logging()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Connection configuration pointing at a test database."""
    return ConnectionConfig(
        host="localhost",
        port=5432,
        user="monitor",
        password=SecretStr("test_password"),
        database="test_db",
    )


@pytest.fixture
def sample_record() -> Dict[str, Any]:
    """One pg_stat_user_tables row as returned by the driver."""
    return {
        "relid": 16384,
        "schemaname": "public",
        "relname": "orders",
        "seq_scan": 5,
        "seq_tup_read": 100,
        "idx_scan": None,
        "idx_tup_fetch": None,
        "n_tup_ins": 10,
        "n_tup_upd": 2,
        "n_tup_del": 1,
        "n_tup_hot_upd": 0,
        "n_live_tup": 9,
        "n_dead_tup": 3,
        "last_vacuum": None,
        "last_autovacuum": None,
        "vacuum_count": 0,
        "autovacuum_count": 1,
        "analyze_count": 0,
        "autoanalyze_count": 2,
    }


# Pytest markers for different test categories
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "database: marks tests exercising the database layer"
    )
    config.addinivalue_line(
        "markers", "property: marks hypothesis property-based tests"
    )


# Auto-mark tests based on their location
def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    tests_root = Path(__file__).parent
    for item in items:
        test_path = Path(str(item.fspath)).relative_to(tests_root)

        if test_path.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)

        if "database" in test_path.parts:
            item.add_marker(pytest.mark.database)


# Clean up between tests
@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration made by a test (for example by the CLI)."""
    yield

    from tablestat.logging.factory import _global_factory
    _global_factory.shutdown()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)

    configure_test_logging()
