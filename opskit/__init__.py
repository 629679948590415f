"""
opskit: connectivity checks, database administration, file and env helpers,
and a package-manager script runner.
"""
from opskit.domain.models import PgResponse, ProcessOutput
from opskit.runtime.process import run_npm_script
from opskit.storage.db import create_database, rename_database, test_postgres_url
from opskit.storage.kv import test_redis_parameters
from opskit.utils.env_json import env_to_json_string, json_string_to_env
from opskit.utils.files import copy_file, file_exists, find_nonexistent_files

__version__ = "1.0.0"

__all__ = [
    "PgResponse",
    "ProcessOutput",
    "copy_file",
    "create_database",
    "env_to_json_string",
    "file_exists",
    "find_nonexistent_files",
    "json_string_to_env",
    "rename_database",
    "run_npm_script",
    "test_postgres_url",
    "test_redis_parameters",
]
