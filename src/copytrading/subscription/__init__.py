"""
Subscription

A follower's subscription to a provider, with its copy settings.
"""

from copytrading.subscription.model import (
    Subscription,
    SubscriptionStatus,
    SubscriptionUpdate,
    SubscriptionWhere,
)
from copytrading.subscription.repository import SubscriptionRepository

__all__ = [
    "Subscription",
    "SubscriptionRepository",
    "SubscriptionStatus",
    "SubscriptionUpdate",
    "SubscriptionWhere",
]
