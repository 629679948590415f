"""
PostgreSQL connectivity and administration helpers.

Every call builds a throwaway engine (no pooling, AUTOCOMMIT so that
CREATE/ALTER DATABASE run outside a transaction block), does one unit of
work, and disposes of the engine on all exit paths.

Failures are reported as a PgResponse, never raised:
  - server errors carry the PostgreSQL SQLSTATE (e.g. 42P04 duplicate_database)
  - client-side errors (unreachable host, bad URL) carry code "unknown"
"""
import asyncio
from typing import Callable

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from opskit.config.config import get_config
from opskit.constants import (
    PG_ACCEPTED_SCHEMES,
    PG_PROBE_QUERY,
    PG_SUCCESS_CODE,
    PG_SUCCESS_MESSAGE,
    PG_UNKNOWN_CODE,
)
from opskit.domain.models import PgResponse
from opskit.monitoring.logger import get_logger
from opskit.monitoring.redaction import redact_url

logger = get_logger(__name__)


def normalize_postgres_url(url: str) -> str:
    """
    Return *url* as a SQLAlchemy PostgreSQL URL.

    ``postgres://`` (libpq/Heroku style) is rewritten to ``postgresql://``.

    Raises:
        ValueError: If the scheme is not a PostgreSQL scheme
    """
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ValueError(f"Invalid connection string (missing scheme): {redact_url(url)}")
    backend = scheme.split("+", 1)[0].lower()
    if backend not in PG_ACCEPTED_SCHEMES:
        raise ValueError(
            f"Only PostgreSQL is supported. Got scheme '{scheme}'. "
            "Use a postgresql:// connection string."
        )
    if backend == "postgres":
        scheme = "postgresql" + scheme[len("postgres"):]
    return f"{scheme}://{rest}"


def _create_engine(url: str) -> Engine:
    timeout = get_config().database.connect_timeout_seconds
    return create_engine(
        make_url(normalize_postgres_url(url)),
        poolclass=NullPool,
        isolation_level="AUTOCOMMIT",
        connect_args={"connect_timeout": timeout},
    )


def quote_identifier(conn: Connection, name: str) -> str:
    """Always-quoted identifier; embedded double quotes are doubled."""
    return conn.dialect.identifier_preparer.quote_identifier(name)


def error_response(error: Exception) -> PgResponse:
    """
    Map a driver/SQLAlchemy error to a PgResponse.

    Errors raised by the PostgreSQL server expose a SQLSTATE on the DBAPI
    exception (``pgcode``); everything else is reported as "unknown".
    """
    if isinstance(error, DBAPIError) and error.orig is not None:
        orig = error.orig
        pgcode = getattr(orig, "pgcode", None)
        if pgcode:
            diag = getattr(orig, "diag", None)
            message = getattr(diag, "message_primary", None) or str(orig).strip()
            return PgResponse(code=pgcode, message=message)
        return PgResponse(code=PG_UNKNOWN_CODE, message=str(orig).strip())
    return PgResponse(code=PG_UNKNOWN_CODE, message=str(error).strip())


# Raised outside the DBAPI wrapper: missing driver modules, and driver-side
# argument checks (psycopg2 rejects NUL characters with ValueError).
_CLIENT_ERRORS = (SQLAlchemyError, ImportError, ValueError, TypeError)


def _run(url: str, work: Callable[[Connection], PgResponse]) -> PgResponse:
    """Open a connection, run *work*, and always dispose of the engine."""
    try:
        engine = _create_engine(url)
    except _CLIENT_ERRORS as e:
        return error_response(e)

    try:
        with engine.connect() as conn:
            return work(conn)
    except _CLIENT_ERRORS as e:
        return error_response(e)
    finally:
        engine.dispose()


# ---------------------------------------------------------------------------
# Blocking implementations (run in a worker thread by the async API)
# ---------------------------------------------------------------------------

def _test_postgres_url_sync(url: str) -> PgResponse:
    def work(conn: Connection) -> PgResponse:
        conn.execute(text(PG_PROBE_QUERY))
        return PgResponse(code=PG_SUCCESS_CODE, message=PG_SUCCESS_MESSAGE)

    return _run(url, work)


def _create_database_sync(url: str, database: str) -> PgResponse:
    def work(conn: Connection) -> PgResponse:
        conn.execute(text(f"CREATE DATABASE {quote_identifier(conn, database)}"))
        return PgResponse(
            code=PG_SUCCESS_CODE,
            message=f"Successfully created database '{database}'",
        )

    return _run(url, work)


def _rename_database_sync(url: str, database: str, new_database_name: str) -> PgResponse:
    def work(conn: Connection) -> PgResponse:
        conn.execute(text(
            f"ALTER DATABASE {quote_identifier(conn, database)} "
            f"RENAME TO {quote_identifier(conn, new_database_name)}"
        ))
        return PgResponse(
            code=PG_SUCCESS_CODE,
            message=f"Database {database} renamed to {new_database_name}",
        )

    return _run(url, work)


def _log_result(event: str, url: str, result: PgResponse, **context) -> None:
    if result.ok:
        logger.info(event, url=redact_url(url), code=result.code, **context)
    else:
        logger.warning(event, url=redact_url(url), code=result.code, error=result.message, **context)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def test_postgres_url(url: str) -> PgResponse:
    """
    Check that *url* accepts connections by running ``SELECT 1``.

    Returns:
        PgResponse("00000", "Success") or the failure code and message
    """
    result = await asyncio.to_thread(_test_postgres_url_sync, url)
    _log_result("POSTGRES_CHECK", url, result)
    return result


async def create_database(url: str, database: str) -> PgResponse:
    """
    Create *database* using a connection to *url* (usually the ``postgres`` DB).

    An existing database yields SQLSTATE 42P04; an invalid name the
    server's syntax/name error code.
    """
    result = await asyncio.to_thread(_create_database_sync, url, database)
    _log_result("DATABASE_CREATE", url, result, database=database)
    return result


async def rename_database(url: str, database: str, new_database_name: str) -> PgResponse:
    """
    Rename *database* to *new_database_name*.

    A missing source yields SQLSTATE 3D000, a taken target 42P04. PostgreSQL
    refuses to rename the database *url* is connected to (55006).
    """
    result = await asyncio.to_thread(_rename_database_sync, url, database, new_database_name)
    _log_result("DATABASE_RENAME", url, result, database=database, new_database_name=new_database_name)
    return result
