from dataclasses import dataclass
from datetime import datetime

from copytrading.schema import (
    Column,
    DbEnum,
    EnumCodec,
    Record,
    SqlType,
    TableSchema,
    TimestampCodec,
    WhereModel,
)

TABLE_NAME = "copy_trading_provider"
PK = "copy_trading_provider_pk"


class ProviderStatus(DbEnum):
    ACTIVE = "Active"
    PAUSED = "Paused"
    DISABLED = "Disabled"


@dataclass
class Provider(Record):
    id: str
    trader_id: str
    account_id: str
    status: ProviderStatus
    create_date: datetime


@dataclass
class ProviderUpdate(Record):
    id: str
    status: ProviderStatus


@dataclass
class ProviderWhere(WhereModel):
    id: str | None = None
    trader_id: str | None = None
    account_id: str | None = None


SCHEMA = TableSchema(
    table_name=TABLE_NAME,
    columns=(
        Column("id", SqlType.TEXT),
        Column("trader_id", SqlType.TEXT),
        Column("account_id", SqlType.TEXT),
        Column("status", SqlType.TEXT, codec=EnumCodec(ProviderStatus)),
        Column("create_date", SqlType.TIMESTAMP, codec=TimestampCodec()),
    ),
    primary_key=("id",),
    primary_key_name=PK,
)
