"""
Database connection and query utilities.

Provides a shared, reference-counted handle around a psycopg async
connection pool, with helpers that return rows as dictionaries.

Repositories for different entities can share one Database: each owner
calls retain() when it takes the handle and release() when it is done,
and the pool is closed when the last owner releases it.

For testing, use set_connection_override() to inject a connection
that will be used instead of the pool. Every operation then runs in a
savepoint of that connection, so the test fixture can roll back
everything at the end.
"""

import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any

import psycopg
from psycopg import errors as pg_errors
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from copytrading.config import PostgresSettings
from copytrading.errors import DuplicateKeyError, StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(target: str):
    """
    Translate psycopg exceptions into the copytrading error taxonomy.

    The original exception is kept as __cause__; nothing is retried.
    """
    try:
        yield
    except pg_errors.UniqueViolation as e:
        logger.warning("Duplicate key in %s: %s", target, e)
        raise DuplicateKeyError(f"Duplicate key in {target}: {e}") from e
    except psycopg.Error as e:
        logger.warning("Store error on %s: %s", target, e)
        raise StoreError(f"Store error on {target}: {e}") from e


class Database:
    """Shared ownership handle for the connection pool of one service."""

    def __init__(self, settings: PostgresSettings, service_name: str):
        self.settings = settings
        self.service_name = service_name
        self._pool: AsyncConnectionPool | None = None
        self._connection_override: psycopg.AsyncConnection | None = None
        self._refs = 0
        self._open_lock = asyncio.Lock()

    # =========================================================================
    # Connection Override (for testing)
    # =========================================================================

    def set_connection_override(self, conn: psycopg.AsyncConnection) -> None:
        """
        Set a connection to use instead of the pool.

        Used by test fixtures to ensure all database operations run
        within a single transaction that can be rolled back.

        Args:
            conn: The connection to use for all subsequent operations
        """
        self._connection_override = conn

    def clear_connection_override(self) -> None:
        """Clear the connection override, restoring normal behavior."""
        self._connection_override = None

    # =========================================================================
    # Lifetime
    # =========================================================================

    @property
    def refs(self) -> int:
        return self._refs

    async def open(self) -> None:
        """
        Open the pool if it is not open yet. No-op with an override set.

        Concurrent callers share one pool.

        Raises:
            StoreError: the pool could not connect
        """
        async with self._open_lock:
            if self._connection_override is not None or self._pool is not None:
                return
            pool = AsyncConnectionPool(
                self.settings.database_url,
                min_size=self.settings.pool_min_size,
                max_size=self.settings.pool_max_size,
                timeout=self.settings.connect_timeout,
                kwargs={"application_name": self.service_name},
                open=False,
            )
            try:
                with store_errors(self.service_name):
                    await pool.open(wait=True, timeout=self.settings.connect_timeout)
            except StoreError:
                await pool.close()
                raise
            self._pool = pool
        logger.info(
            "Opened connection pool for %s (min=%d, max=%d)",
            self.service_name,
            self.settings.pool_min_size,
            self.settings.pool_max_size,
        )

    def retain(self) -> "Database":
        """Register a new owner of this handle."""
        self._refs += 1
        return self

    async def release(self) -> None:
        """
        Drop one owner. The pool is closed when no owner is left.
        """
        if self._refs <= 0:
            raise RuntimeError("Database released more times than retained")
        self._refs -= 1
        if self._refs == 0 and self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Closed connection pool for %s", self.service_name)

    # =========================================================================
    # Connection Management
    # =========================================================================

    @asynccontextmanager
    async def connection(self):
        """
        Async context manager for database connections.

        In normal operation:
            - Borrows a connection from the pool
            - Commits on successful exit
            - Rolls back on exception
            - Returns the connection to the pool

        With override set (testing):
            - Returns the override connection inside a savepoint
            - The savepoint is released on success, rolled back on exception
            - Caller (test fixture) manages the outer transaction
        """
        if self._connection_override is not None:
            async with self._connection_override.transaction():
                yield self._connection_override
            return

        if self._pool is None:
            raise StoreError(f"Database for {self.service_name} is not open")

        async with self._pool.connection() as conn:
            yield conn

    @asynccontextmanager
    async def cursor(self):
        """Async context manager for a cursor with dict rows."""
        async with self.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                yield cur

    # =========================================================================
    # Query Helpers
    # =========================================================================

    async def execute(self, query, params=None) -> int:
        """
        Execute a query without returning results.

        Use for INSERT, UPDATE, DELETE.

        Returns:
            Number of rows affected
        """
        async with self.cursor() as cur:
            await cur.execute(query, params)
            return cur.rowcount

    async def fetch_one(self, query, params=None) -> dict[str, Any] | None:
        """Execute a query and return a single row as dict, or None."""
        async with self.cursor() as cur:
            await cur.execute(query, params)
            return await cur.fetchone()

    async def fetch_all(self, query, params=None) -> list[dict[str, Any]]:
        """Execute a query and return all rows as list of dicts."""
        async with self.cursor() as cur:
            await cur.execute(query, params)
            return await cur.fetchall()
