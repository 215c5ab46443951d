from dataclasses import dataclass

from copytrading.schema import (
    Column,
    DbEnum,
    EnumCodec,
    Record,
    SqlType,
    TableSchema,
    WhereModel,
)

TABLE_NAME = "copy_trading_position"
PK = "copy_trading_position_pk"


class PositionType(DbEnum):
    MARKET = "Market"
    PENDING = "Pending"


@dataclass
class Position(Record):
    id: str
    provider_id: str
    subscription_id: str
    # Id of the originating position on the provider's account
    source_position_id: str
    position_type: PositionType


@dataclass
class PositionWhere(WhereModel):
    id: list[str] | None = None
    source_position_id: str | None = None
    subscription_id: str | None = None


SCHEMA = TableSchema(
    table_name=TABLE_NAME,
    columns=(
        Column("id", SqlType.TEXT),
        Column("provider_id", SqlType.TEXT),
        Column("subscription_id", SqlType.TEXT),
        Column("source_position_id", SqlType.TEXT),
        Column("position_type", SqlType.TEXT, codec=EnumCodec(PositionType)),
    ),
    primary_key=("id",),
    primary_key_name=PK,
)
