"""
Unit tests for Record dict conversion.

Run with: pytest src/copytrading/schema/record_test.py -v
"""

import pytest

from copytrading.errors import InvalidEnumValueError
from copytrading.position import Position, PositionType
from copytrading.provider import Provider, ProviderStatus
from copytrading.subscription import Subscription


class TestToDict:
    def test_provider(self, sample_provider):
        data = sample_provider.to_dict()

        assert data["status"] == "Active"
        assert data["create_date"] == "2024-03-01T12:30:15.123456+00:00"

    def test_subscription_keeps_none(self, make_subscription):
        data = make_subscription(pl_force_stop_loss=None).to_dict()

        assert data["pl_force_stop_loss"] is None


class TestFromDict:
    def test_provider_round_trip(self, sample_provider):
        assert Provider.from_dict(sample_provider.to_dict()) == sample_provider

    def test_subscription_round_trip(self, sample_subscription):
        assert Subscription.from_dict(sample_subscription.to_dict()) == sample_subscription

    def test_position_decodes_token(self):
        position = Position.from_dict(
            {
                "id": "x",
                "provider_id": "p1",
                "subscription_id": "s1",
                "source_position_id": "src",
                "position_type": "Pending",
            }
        )

        assert position.position_type is PositionType.PENDING

    def test_unknown_token_raises(self, sample_provider):
        data = sample_provider.to_dict()
        data["status"] = "Gone"

        with pytest.raises(InvalidEnumValueError):
            Provider.from_dict(data)

    def test_missing_optional_field_uses_default(self, sample_subscription):
        data = sample_subscription.to_dict()
        del data["pl_force_stop_loss"]

        assert Subscription.from_dict(data).pl_force_stop_loss is None

    def test_missing_required_field_raises(self):
        with pytest.raises(TypeError):
            Provider.from_dict({"id": "p1", "status": ProviderStatus.ACTIVE.value})
