"""
Table schema descriptors.

A TableSchema declares what a repository expects its table to look like:
the ordered columns, the primary key and any secondary indexes. It is
checked against the live table when a repository is built, and drives the
column order of every generated INSERT and UPDATE.
"""

from dataclasses import dataclass, fields
from typing import Any


class SqlType:
    """Postgres type names as reported by information_schema.columns."""

    TEXT = "text"
    DOUBLE = "double precision"
    TIMESTAMP = "timestamp without time zone"


@dataclass(frozen=True)
class Column:
    name: str
    sql_type: str
    nullable: bool = False
    codec: Any = None

    def encode(self, value):
        if value is None or self.codec is None:
            return value
        return self.codec.encode(value)

    def decode(self, value):
        if value is None or self.codec is None:
            return value
        return self.codec.decode(value)


@dataclass(frozen=True)
class Index:
    name: str
    columns: tuple[str, ...]
    unique: bool = False
    order: str = "ASC"


@dataclass(frozen=True)
class TableSchema:
    table_name: str
    columns: tuple[Column, ...]
    primary_key: tuple[str, ...]
    primary_key_name: str | None = None
    indexes: tuple[Index, ...] = ()

    def __post_init__(self):
        names = [c.name for c in self.columns]
        if len(set(names)) != len(names):
            raise ValueError(f"{self.table_name}: duplicate column names in {names}")
        if not self.primary_key:
            raise ValueError(f"{self.table_name}: a primary key is required")
        for name in self.primary_key:
            if name not in names:
                raise ValueError(f"{self.table_name}: primary key column {name} is not declared")
        for index in self.indexes:
            if index.order not in ("ASC", "DESC"):
                raise ValueError(f"{self.table_name}: index {index.name} has order {index.order}")
            for name in index.columns:
                if name not in names:
                    raise ValueError(
                        f"{self.table_name}: index {index.name} uses undeclared column {name}"
                    )

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> Column:
        for c in self.columns:
            if c.name == name:
                return c
        raise KeyError(f"{self.table_name} has no column {name}")

    def to_row(self, record) -> tuple:
        """Record -> storage values, in column order."""
        return tuple(c.encode(getattr(record, c.name)) for c in self.columns)

    def encode_fields(self, record) -> dict[str, Any]:
        """
        Storage values for every dataclass field of `record`.

        Used for partial shapes (updates) whose fields are a subset of the
        table's columns.
        """
        return {
            f.name: self.column(f.name).encode(getattr(record, f.name))
            for f in fields(record)
        }

    def from_row(self, row: dict[str, Any], record_type: type):
        """dict row -> record, decoding enum tokens and timestamps."""
        return record_type(**{c.name: c.decode(row[c.name]) for c in self.columns})
