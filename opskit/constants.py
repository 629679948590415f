"""
Package-wide constants for opskit.

Centralizes status codes, defaults and file-format tokens used across modules.
"""

# PostgreSQL result codes
PG_SUCCESS_CODE = "00000"  # SQLSTATE successful_completion
PG_UNKNOWN_CODE = "unknown"  # client-side failure, no SQLSTATE available
PG_SUCCESS_MESSAGE = "Success"
PG_PROBE_QUERY = "SELECT 1"
PG_ACCEPTED_SCHEMES = ("postgresql", "postgres")

# Redis
REDIS_PONG = "PONG"
REDIS_DEFAULT_PORT = 6379

# Timeouts (seconds)
DEFAULT_PG_CONNECT_TIMEOUT = 10
DEFAULT_REDIS_CONNECT_TIMEOUT = 5.0
DEFAULT_REDIS_SOCKET_TIMEOUT = 5.0

# Subprocess runner
DEFAULT_SCRIPT_RUNNER = "npm run"
EXIT_STATUS_UNKNOWN = -1  # process ended without an exit code (signal)
PROCESS_KILL_GRACE_SECONDS = 5.0  # wait for the killed tree to release its pipes

# Env file syntax
ENV_ASSIGNMENT = "="
ENV_COMMENT = "#"
ENV_FILE_ENCODING = "utf-8"
