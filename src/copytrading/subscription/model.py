from dataclasses import dataclass

from copytrading.schema import (
    Column,
    DbEnum,
    EnumCodec,
    FloatCodec,
    Index,
    Record,
    SqlType,
    TableSchema,
    WhereModel,
)

TABLE_NAME = "copy_trading_subscription"
PK = "copy_trading_subscription_pk"
PROVIDER_ID_INDEX = "copy_trading_subscription_provider_id_index"


class SubscriptionStatus(DbEnum):
    ACTIVE = "Active"
    PAUSED = "Paused"


@dataclass
class Subscription(Record):
    id: str
    provider_id: str
    trader_id: str
    account_id: str
    status: SubscriptionStatus
    # Multiplier applied to the copied trade size; range is up to the caller
    copy_trading_coefficient: float
    # None means no forced stop
    pl_force_stop_loss: float | None = None


@dataclass
class SubscriptionUpdate(Record):
    id: str
    status: SubscriptionStatus
    copy_trading_coefficient: float
    pl_force_stop_loss: float | None = None


@dataclass
class SubscriptionWhere(WhereModel):
    id: str | None = None
    provider_id: str | None = None


SCHEMA = TableSchema(
    table_name=TABLE_NAME,
    columns=(
        Column("id", SqlType.TEXT),
        Column("provider_id", SqlType.TEXT),
        Column("trader_id", SqlType.TEXT),
        Column("account_id", SqlType.TEXT),
        Column("status", SqlType.TEXT, codec=EnumCodec(SubscriptionStatus)),
        Column("copy_trading_coefficient", SqlType.DOUBLE, codec=FloatCodec()),
        Column("pl_force_stop_loss", SqlType.DOUBLE, nullable=True, codec=FloatCodec()),
    ),
    primary_key=("id",),
    primary_key_name=PK,
    indexes=(Index(PROVIDER_ID_INDEX, ("provider_id",), unique=False, order="ASC"),),
)
