"""
Position

Positions opened on subscribers' accounts by copying a provider's trade.
"""

from copytrading.position.model import Position, PositionType, PositionWhere
from copytrading.position.repository import PositionRepository

__all__ = ["Position", "PositionRepository", "PositionType", "PositionWhere"]
