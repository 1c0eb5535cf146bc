# =============================================================================
# lib/database.py - Relational Store Access
# =============================================================================
# This module is the only place that talks to the database. It wraps a
# SQLAlchemy engine and exposes a deliberately small surface:
# - query(sql, params): run one parameterized statement, return rows as dicts
# - execute(sql, params): run a write (or many, for a list of params)
# - test_connection(): round-trip SELECT NOW(), version()
#
# Every statement goes through sqlalchemy.text() with bound parameters.
# Never build SQL by formatting or concatenating user input.
#
# Usage:
#   from lib.database import Database
#   db = Database.get_instance()
#   rows = db.query("SELECT id, name FROM amc_companies WHERE state = :state",
#                   {"state": "CA"})
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings, settings as app_settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

Params = Mapping[str, Any] | Sequence[Mapping[str, Any]] | None


class DatabaseError(ApplicationError):
    """
    Error while executing a statement.

    The message carries the driver's error text; callers at the HTTP
    boundary decide whether it may be shown to clients.
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "DATABASE_ERROR")
        super().__init__(message, **kwargs)


def create_database_engine(config: Settings) -> Engine:
    """
    Build the SQLAlchemy engine from settings.

    Connection-level timeouts are the only timeouts applied to queries;
    nothing above this layer retries or cancels.
    """
    engine = create_engine(
        config.database_url,
        pool_size=config.DB_POOL_SIZE,
        pool_pre_ping=True,  # Verify connections before using
        connect_args={
            "connect_timeout": config.DB_CONNECT_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT_MS}",
        },
    )

    # Statement text is logged by query() at debug level instead
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger.info(
        f"Database engine created for {config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"
    )
    return engine


class Database:
    """
    Thin wrapper around a SQLAlchemy engine.

    One instance is shared across the application (see get_instance), but
    tests and scripts can build their own around any engine:

        db = Database(create_engine("sqlite:///test.db"))
        db.execute("INSERT INTO t (name) VALUES (:name)", {"name": "Acme"})
        rows = db.query("SELECT name FROM t")  # [{"name": "Acme"}]
    """

    _instance: Database | None = None

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def get_instance(cls) -> Database:
        """
        Get or create the shared Database built from app settings.

        Returns:
            Database: The application-wide instance

        Raises:
            DatabaseError: If the engine cannot be created
        """
        if cls._instance is None:
            try:
                cls._instance = cls(create_database_engine(app_settings))
            except Exception as e:
                raise DatabaseError(
                    message=f"Failed to create database engine: {e}",
                    code="ENGINE_INIT_FAILED",
                    suggestion="Check the DB_* settings in your .env file",
                ) from e
        return cls._instance

    @classmethod
    def dispose_instance(cls) -> None:
        """Close pooled connections of the shared instance, if any."""
        if cls._instance is not None:
            cls._instance.engine.dispose()
            cls._instance = None

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        Run one parameterized statement and return its rows.

        Args:
            sql: Statement text with :name placeholders
            params: Values for the placeholders

        Returns:
            List of row dicts (empty for statements that return no rows)

        Raises:
            DatabaseError: If the statement fails
        """
        logger.debug(f"Executing query: {sql.strip()[:100]}...")

        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(sql), dict(params or {}))
                rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        except SQLAlchemyError as e:
            logger.error(f"Database query error: {e}")
            raise DatabaseError(
                message=f"Query failed: {e}",
                code="QUERY_FAILED",
            ) from e

        logger.debug(f"Query successful, rows: {len(rows)}")
        return rows

    def execute(self, sql: str, params: Params = None) -> int:
        """
        Run a write statement in its own transaction.

        Passing a list of parameter dicts executes the statement once per
        dict (executemany) inside the same transaction.

        Returns:
            Number of affected rows as reported by the driver
        """
        logger.debug(f"Executing statement: {sql.strip()[:100]}...")

        if params is None:
            bound: Any = {}
        elif isinstance(params, Mapping):
            bound = dict(params)
        else:
            bound = [dict(p) for p in params]

        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(sql), bound)
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Database statement error: {e}")
            raise DatabaseError(
                message=f"Statement failed: {e}",
                code="STATEMENT_FAILED",
            ) from e

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def test_connection(self) -> dict[str, Any]:
        """
        Round-trip a trivial query to prove the database is reachable.

        Returns:
            {"success": True, "data": {"current_time": ..., "version": ...}}
            or {"success": False, "error": "<message>"}
        """
        logger.info("Testing database connection...")
        try:
            rows = self.query("SELECT NOW() AS current_time, version() AS version")
        except DatabaseError as e:
            logger.error(f"Connection test failed: {e.message}")
            return {"success": False, "error": e.message}

        logger.info("Connection test successful")
        return {"success": True, "data": rows[0] if rows else {}}
