from copytrading.provider.model import SCHEMA, Provider, ProviderUpdate, ProviderWhere
from copytrading.repository import UpdatableRepository


class ProviderRepository(UpdatableRepository[Provider, ProviderWhere, ProviderUpdate]):
    """
    Repository for copy-trading providers.
    Providers are added once and changed only through status updates.
    """

    schema = SCHEMA
    record_type = Provider

    async def add_provider(self, provider: Provider) -> None:
        await self.add(provider)

    async def update_provider(self, update: ProviderUpdate) -> None:
        await self.update(update)

    async def query_provider(self, where: ProviderWhere | None = None) -> list[Provider]:
        return await self.query(where)
