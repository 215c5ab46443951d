from copytrading.repository import UpdatableRepository
from copytrading.subscription.model import (
    SCHEMA,
    Subscription,
    SubscriptionUpdate,
    SubscriptionWhere,
)


class SubscriptionRepository(UpdatableRepository[Subscription, SubscriptionWhere, SubscriptionUpdate]):
    """
    Repository for copy-trading subscriptions.
    Lookups by provider use the provider_id index.
    """

    schema = SCHEMA
    record_type = Subscription

    async def add_subscription(self, subscription: Subscription) -> None:
        await self.add(subscription)

    async def update_subscription(self, update: SubscriptionUpdate) -> None:
        await self.update(update)

    async def query_subscription(
        self, where: SubscriptionWhere | None = None
    ) -> list[Subscription]:
        return await self.query(where)
