from copytrading.position.model import SCHEMA, Position, PositionWhere
from copytrading.repository import Repository


class PositionRepository(Repository[Position, PositionWhere]):
    """
    Repository for copied positions.
    Positions are written and removed in bulk and never updated.
    """

    schema = SCHEMA
    record_type = Position

    async def add_positions(self, positions: list[Position]) -> None:
        await self.add_bulk(positions)

    async def delete_positions(self, where: PositionWhere) -> int:
        return await self.delete(where)

    async def query_positions(self, where: PositionWhere | None = None) -> list[Position]:
        return await self.query(where)
