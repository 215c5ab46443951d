"""
Schema

Table descriptors, column codecs, filter models and live-schema verification
shared by every repository.
"""

from copytrading.schema.codec import DbEnum, EnumCodec, FloatCodec, TimestampCodec
from copytrading.schema.record import Record
from copytrading.schema.table import Column, Index, SqlType, TableSchema
from copytrading.schema.where import WhereModel

__all__ = [
    "Column",
    "DbEnum",
    "EnumCodec",
    "FloatCodec",
    "Index",
    "Record",
    "SqlType",
    "TableSchema",
    "TimestampCodec",
    "WhereModel",
]
