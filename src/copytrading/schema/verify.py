"""
Boot-time verification of a live table against its TableSchema.

A mismatch raises SchemaMismatchError listing every problem found, so a
service refuses to start rather than failing later on a bad query.
"""

import logging
from dataclasses import dataclass, field

from copytrading.db import Database, store_errors
from copytrading.errors import SchemaMismatchError
from copytrading.schema.table import Index, TableSchema

logger = logging.getLogger(__name__)


@dataclass
class LiveColumn:
    data_type: str
    nullable: bool


@dataclass
class LiveTable:
    """What the store reports for one table."""

    table_name: str
    columns: dict[str, LiveColumn] = field(default_factory=dict)
    primary_key_name: str | None = None
    primary_key: tuple[str, ...] = ()
    indexes: dict[str, Index] = field(default_factory=dict)

    @property
    def exists(self) -> bool:
        return bool(self.columns)


COLUMNS_QUERY = """
    SELECT column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = current_schema() AND table_name = %s
    ORDER BY ordinal_position
"""

PRIMARY_KEY_QUERY = """
    SELECT tc.constraint_name, kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON kcu.constraint_name = tc.constraint_name
     AND kcu.table_schema = tc.table_schema
     AND kcu.table_name = tc.table_name
    WHERE tc.table_schema = current_schema()
      AND tc.table_name = %s
      AND tc.constraint_type = 'PRIMARY KEY'
    ORDER BY kcu.ordinal_position
"""

INDEXES_QUERY = """
    SELECT i.relname AS index_name,
           ix.indisunique AS is_unique,
           a.attname AS column_name,
           (ix.indoption[(k.n - 1)::int] & 1) = 1 AS is_desc
    FROM pg_class t
    JOIN pg_namespace ns ON ns.oid = t.relnamespace
    JOIN pg_index ix ON ix.indrelid = t.oid
    JOIN pg_class i ON i.oid = ix.indexrelid
    CROSS JOIN LATERAL unnest(ix.indkey) WITH ORDINALITY AS k(attnum, n)
    JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = k.attnum
    WHERE ns.nspname = current_schema()
      AND t.relname = %s
      AND NOT ix.indisprimary
    ORDER BY i.relname, k.n
"""


async def fetch_live_table(database: Database, table_name: str) -> LiveTable:
    live = LiveTable(table_name=table_name)

    with store_errors(table_name):
        for row in await database.fetch_all(COLUMNS_QUERY, (table_name,)):
            live.columns[row["column_name"]] = LiveColumn(
                data_type=row["data_type"],
                nullable=row["is_nullable"] == "YES",
            )

        pk_rows = await database.fetch_all(PRIMARY_KEY_QUERY, (table_name,))
        if pk_rows:
            live.primary_key_name = pk_rows[0]["constraint_name"]
            live.primary_key = tuple(r["column_name"] for r in pk_rows)

        for row in await database.fetch_all(INDEXES_QUERY, (table_name,)):
            name = row["index_name"]
            existing = live.indexes.get(name)
            columns = (existing.columns if existing else ()) + (row["column_name"],)
            live.indexes[name] = Index(
                name=name,
                columns=columns,
                unique=row["is_unique"],
                order="DESC" if row["is_desc"] else "ASC",
            )

    return live


def compare_schema(schema: TableSchema, live: LiveTable) -> list[str]:
    """Every way `live` disagrees with `schema`. Empty when they match."""
    if not live.exists:
        return [f"table {schema.table_name} does not exist"]

    problems = []
    for column in schema.columns:
        found = live.columns.get(column.name)
        if found is None:
            problems.append(f"column {column.name} is missing")
            continue
        if found.data_type != column.sql_type:
            problems.append(
                f"column {column.name} has type {found.data_type}, expected {column.sql_type}"
            )
        if found.nullable != column.nullable:
            expected = "nullable" if column.nullable else "not null"
            problems.append(f"column {column.name} should be {expected}")

    if not live.primary_key:
        problems.append("primary key is missing")
    else:
        if live.primary_key != schema.primary_key:
            problems.append(
                f"primary key is on {list(live.primary_key)}, expected {list(schema.primary_key)}"
            )
        if schema.primary_key_name and live.primary_key_name != schema.primary_key_name:
            problems.append(
                f"primary key is named {live.primary_key_name}, expected {schema.primary_key_name}"
            )

    for index in schema.indexes:
        found = live.indexes.get(index.name)
        if found is None:
            problems.append(f"index {index.name} is missing")
            continue
        if found.columns != index.columns:
            problems.append(
                f"index {index.name} is on {list(found.columns)}, expected {list(index.columns)}"
            )
        if found.unique != index.unique:
            problems.append(f"index {index.name} unique={found.unique}, expected {index.unique}")
        if found.order != index.order:
            problems.append(f"index {index.name} order is {found.order}, expected {index.order}")

    return problems


async def verify_schema(database: Database, schema: TableSchema) -> None:
    live = await fetch_live_table(database, schema.table_name)
    problems = compare_schema(schema, live)
    if problems:
        logger.error("Schema mismatch on %s: %s", schema.table_name, problems)
        raise SchemaMismatchError(schema.table_name, problems)

    extra = sorted(set(live.columns) - set(schema.column_names))
    if extra:
        logger.warning("Table %s has undeclared columns %s", schema.table_name, extra)
    logger.info("Verified schema of %s", schema.table_name)
