"""
External data-store helpers (PostgreSQL, Redis).
"""
from opskit.storage.db import create_database, rename_database, test_postgres_url
from opskit.storage.kv import test_redis_parameters

__all__ = [
    "create_database",
    "rename_database",
    "test_postgres_url",
    "test_redis_parameters",
]
