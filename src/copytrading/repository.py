"""
Generic repository over one table.

A concrete repository names its TableSchema and record type; this class
turns records, update shapes and where-models into SQL. Every public
method is one independent round trip to the store: no retries, no
caching, and no transaction spans two calls.
"""

import logging
from typing import Generic, Iterable, TypeVar

from psycopg import sql

from copytrading.config import PostgresSettings
from copytrading.db import Database, store_errors
from copytrading.errors import NotFoundError, UnconstrainedDeleteError
from copytrading.schema.table import TableSchema
from copytrading.schema.verify import verify_schema
from copytrading.schema.where import WhereModel

E = TypeVar("E")
F = TypeVar("F", bound=WhereModel)
U = TypeVar("U")

# Postgres accepts at most 65535 bind parameters per statement
MAX_PARAMS_PER_STATEMENT = 65535


class Repository(Generic[E, F]):
    schema: TableSchema
    record_type: type

    def __init__(self, database: Database):
        """
        Attach to a shared Database handle.

        The handle is retained for the lifetime of the repository; call
        close() to give it back. Use `create()` to also open the pool and
        verify the table.
        """
        self.database = database.retain()
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @classmethod
    async def create(cls, settings: PostgresSettings, service_name: str):
        """
        Open a store handle for `service_name`, verify the table schema and
        return a ready repository.

        Raises:
            SchemaMismatchError: the live table does not match `cls.schema`
        """
        repository = cls(Database(settings, service_name))
        try:
            await repository.database.open()
            await repository.verify_schema()
        except Exception:
            await repository.close()
            raise
        return repository

    async def verify_schema(self) -> None:
        await verify_schema(self.database, self.schema)

    async def close(self) -> None:
        await self.database.release()

    @property
    def table_name(self) -> str:
        return self.schema.table_name

    # =========================================================================
    # SQL builders
    # =========================================================================

    def _insert_sql(self, row_count: int) -> sql.Composed:
        width = len(self.schema.columns)
        row = sql.SQL("({})").format(sql.SQL(", ").join(sql.Placeholder() * width))
        return sql.SQL("INSERT INTO {} ({}) VALUES {}").format(
            sql.Identifier(self.table_name),
            sql.SQL(", ").join(map(sql.Identifier, self.schema.column_names)),
            sql.SQL(", ").join([row] * row_count),
        )

    def _select_sql(self, where_clause: sql.Composable) -> sql.Composed:
        return sql.SQL("SELECT {} FROM {}{} ORDER BY {}").format(
            sql.SQL(", ").join(map(sql.Identifier, self.schema.column_names)),
            sql.Identifier(self.table_name),
            where_clause,
            sql.SQL(", ").join(map(sql.Identifier, self.schema.primary_key)),
        )

    # =========================================================================
    # Operations
    # =========================================================================

    async def add(self, record: E) -> None:
        """
        Insert one row.

        Raises:
            DuplicateKeyError: a row with the same primary key exists
        """
        self._logger.debug("Inserting into %s", self.table_name)
        with store_errors(self.table_name):
            await self.database.execute(self._insert_sql(1), self.schema.to_row(record))

    async def add_bulk(self, records: Iterable[E]) -> None:
        """
        Insert many rows atomically.

        Rows are sent as multi-row INSERT statements inside one transaction;
        a duplicate key anywhere in the batch fails the whole batch and
        nothing is written.
        """
        rows = [self.schema.to_row(r) for r in records]
        if not rows:
            return

        chunk_size = MAX_PARAMS_PER_STATEMENT // len(self.schema.columns)
        self._logger.debug("Bulk inserting %d rows into %s", len(rows), self.table_name)
        with store_errors(self.table_name):
            async with self.database.cursor() as cur:
                for start in range(0, len(rows), chunk_size):
                    chunk = rows[start : start + chunk_size]
                    params = [value for row in chunk for value in row]
                    await cur.execute(self._insert_sql(len(chunk)), params)

    async def delete(self, where: F) -> int:
        """
        Delete every row matching `where`. Returns the number of rows deleted.

        Raises:
            UnconstrainedDeleteError: `where` is missing or has no predicate.
                Raised before the store is contacted.
        """
        if where is None or where.is_empty():
            raise UnconstrainedDeleteError(self.table_name)

        where_clause, params = where.to_sql(self.schema)
        query = sql.SQL("DELETE FROM {}{}").format(sql.Identifier(self.table_name), where_clause)

        self._logger.debug("Deleting from %s where %s", self.table_name, where)
        with store_errors(self.table_name):
            return await self.database.execute(query, params)

    async def query(self, where: F | None = None) -> list[E]:
        """
        All rows matching `where`, or every row when it is None.

        Results are fully materialized and ordered by primary key.

        Raises:
            InvalidEnumValueError: a stored token is not a known variant
        """
        if where is None:
            where_clause, params = sql.SQL(""), []
        else:
            where_clause, params = where.to_sql(self.schema)

        with store_errors(self.table_name):
            rows = await self.database.fetch_all(self._select_sql(where_clause), params)
        self._logger.debug("Fetched %d rows from %s", len(rows), self.table_name)
        return [self.schema.from_row(row, self.record_type) for row in rows]


class UpdatableRepository(Repository[E, F], Generic[E, F, U]):
    """Repository whose rows are changed in place through an update shape U."""

    async def update(self, update: U) -> None:
        """
        Write every field of `update` to the row matching its primary key.

        Raises:
            NotFoundError: no row has that key; nothing is created
        """
        values = self.schema.encode_fields(update)
        key = {name: values.pop(name) for name in self.schema.primary_key}
        if not values:
            raise ValueError(f"{type(update).__name__} has no columns to update")

        query = sql.SQL("UPDATE {} SET {} WHERE {}").format(
            sql.Identifier(self.table_name),
            sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(name)) for name in values
            ),
            sql.SQL(" AND ").join(
                sql.SQL("{} = %s").format(sql.Identifier(name)) for name in key
            ),
        )

        self._logger.debug("Updating %s %s", self.table_name, key)
        with store_errors(self.table_name):
            updated = await self.database.execute(
                query, (*values.values(), *key.values())
            )
        if updated == 0:
            raise NotFoundError(self.table_name, key)

