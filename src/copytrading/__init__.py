"""
Copytrading

Typed persistence for copy-trading providers, subscriptions and positions.
"""

from copytrading.position import PositionRepository
from copytrading.provider import ProviderRepository
from copytrading.subscription import SubscriptionRepository

__all__ = ["PositionRepository", "ProviderRepository", "SubscriptionRepository"]
