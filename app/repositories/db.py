"""DuckDB connection management."""

from pathlib import Path

import duckdb
from loguru import logger

from app.errors import ConfigurationError
from app.models import ALL_DDL

MEMORY = ":memory:"


def db_exists(db_path: str) -> bool:
    """Check if database file exists."""
    return db_path == MEMORY or Path(db_path).exists()


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Initialize internal storage tables (idempotent - uses IF NOT EXISTS)."""
    for ddl in ALL_DDL:
        conn.execute(ddl)
    logger.debug("DB tables initialized")


def connect(db_path: str, read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Open the backing store.

    Raises ConfigurationError when no path is configured or the file cannot be
    opened. Nothing is written before the connection succeeds.
    """
    if not db_path:
        raise ConfigurationError("No backing store configured (ICONNECT_DB_PATH is empty)")

    if read_only and not db_exists(db_path):
        raise ConfigurationError(f"Backing store not found: {db_path}")

    if not db_exists(db_path):
        logger.warning("DB not found: {}. Creating empty DB.", db_path)

    try:
        conn = duckdb.connect(db_path, read_only=read_only)
    except duckdb.Error as e:
        raise ConfigurationError(f"Cannot open backing store {db_path}: {e}") from e

    if not read_only:
        init_tables(conn)
    logger.debug("DB connected: {} (read_only={})", db_path, read_only)
    return conn


def close(conn: duckdb.DuckDBPyConnection | None) -> None:
    """Close a connection, ignoring one that was never opened."""
    if conn is not None:
        conn.close()
        logger.debug("DB connection closed")
