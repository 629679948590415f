"""
Pytest configuration and shared fixtures.
"""
import os

import pytest
from unittest.mock import MagicMock
from sqlalchemy.dialects import postgresql

from opskit.config.config import Config, set_config

# Variables that would otherwise leak from the developer's shell into config/snapshot tests.
_ENV_VARS = (
    "ENVIRONMENT",
    "DATABASE_URL",
    "REDIS_HOST",
    "REDIS_USERNAME",
    "REDIS_PASSWORD",
    "PROCESS__SCRIPT_RUNNER",
    "PROCESS__TIMEOUT_SECONDS",
    "PROCESS__NPM_GLOBAL_BIN",
    "DATABASE__CONNECT_TIMEOUT_SECONDS",
    "MONITORING__LOG_LEVEL",
)


def pytest_configure(config):
    """Register custom marks. Async tests require pytest-asyncio."""
    config.addinivalue_line("markers", "asyncio: mark test as async (pytest-asyncio).")


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Every test starts from default configuration and a clean environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_config(Config())
    yield
    set_config(None)


@pytest.fixture
def mock_engine():
    """
    A fake SQLAlchemy engine whose connection uses the real PostgreSQL dialect
    for identifier quoting.
    """
    engine = MagicMock()
    conn = MagicMock()
    conn.dialect = postgresql.dialect()
    cm = MagicMock()
    cm.__enter__ = MagicMock(return_value=conn)
    cm.__exit__ = MagicMock(return_value=False)
    engine.connect.return_value = cm
    return engine, conn
