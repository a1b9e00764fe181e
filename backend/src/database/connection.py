"""
Theme Park Wait Times - Database Connection Management
Provides the SQLAlchemy engine backing the document store.

DB_URL selects any SQLAlchemy URL (e.g. sqlite:///waits.db for local runs);
when unset, a MySQL URL is built from the DB_* settings.
"""

from contextlib import contextmanager
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, Connection, URL, make_url
from typing import Generator

from utils.config import (
    DB_URL, DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD,
    DB_POOL_SIZE, DB_POOL_MAX_OVERFLOW, DB_POOL_RECYCLE, DB_POOL_PRE_PING,
    config
)
from utils.logger import logger, log_database_error


def build_database_url(db_url: str = DB_URL) -> URL:
    """
    Resolve the database URL.

    Uses URL.create() for the MySQL fallback so the password never appears in logs.
    """
    if db_url:
        return make_url(db_url)
    return URL.create(
        drivername="mysql+pymysql",
        username=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        database=DB_NAME,
        query={
            "charset": "utf8mb4",
            "init_command": "SET time_zone='+00:00'",  # Force UTC for all connections
        },
    )


class DatabaseConnection:
    """
    Manages the document store database engine.

    Features:
    - Connection pooling for server databases
    - Automatic connection recycling (every hour)
    - Health checks before connection use (pool_pre_ping)
    """

    def __init__(self, db_url: str = DB_URL):
        self._db_url = db_url
        self._engine: Engine = None

    def get_engine(self) -> Engine:
        """
        Get or create the SQLAlchemy engine.

        Raises:
            DatabaseConnectionError: If the engine cannot be created
        """
        if self._engine is None:
            try:
                url = build_database_url(self._db_url)
                engine_kwargs = {
                    "pool_pre_ping": DB_POOL_PRE_PING,
                    "echo": False,
                    "hide_parameters": True,
                }
                if url.get_backend_name() != "sqlite":
                    engine_kwargs.update(
                        pool_size=DB_POOL_SIZE,
                        max_overflow=DB_POOL_MAX_OVERFLOW,
                        pool_recycle=DB_POOL_RECYCLE,
                    )

                self._engine = create_engine(url, **engine_kwargs)

                logger.info("Database engine initialized", extra={
                    "backend": url.get_backend_name(),
                    "database": url.database,
                    "environment": config.environment
                })

            except Exception as e:
                log_database_error(e, "Failed to create database engine")
                raise DatabaseConnectionError(f"Failed to create database engine: {e}")

        return self._engine

    @contextmanager
    def get_connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for database connections; commits on success.

        Example:
            >>> with db.get_connection() as conn:
            ...     conn.execute(text("SELECT 1"))
        """
        engine = self.get_engine()
        connection = engine.connect()
        try:
            yield connection
            connection.commit()
        except Exception as e:
            connection.rollback()
            log_database_error(e, "Transaction failed, rolled back")
            raise
        finally:
            connection.close()

    def create_tables(self) -> None:
        """Create the document table if it does not exist."""
        from models import Base
        Base.metadata.create_all(bind=self.get_engine())

    def test_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.get_connection() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection test successful")
            return True
        except Exception as e:
            logger.error("Database connection test failed", extra={
                "error": str(e)
            })
            return False

    def close(self):
        """Close all connections in the pool."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database connection pool closed")


class DatabaseConnectionError(Exception):
    """Raised when database connection fails."""
    pass


# Global database connection instance
db = DatabaseConnection()
