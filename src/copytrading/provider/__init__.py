"""
Provider

Traders whose positions are copied by subscribers.
"""

from copytrading.provider.model import (
    Provider,
    ProviderStatus,
    ProviderUpdate,
    ProviderWhere,
)
from copytrading.provider.repository import ProviderRepository

__all__ = [
    "Provider",
    "ProviderRepository",
    "ProviderStatus",
    "ProviderUpdate",
    "ProviderWhere",
]
