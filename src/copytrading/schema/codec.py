"""
Column codecs: conversion between record values and storage values.

Enums are stored as their string token. The token set is part of the
storage contract: renaming a token is a breaking schema change.
"""

from datetime import datetime, timezone
from enum import Enum

from copytrading.errors import InvalidEnumValueError


class DbEnum(Enum):
    """Enum stored as a string column. Each value is the stored token."""

    def encode(self) -> str:
        return self.value

    @classmethod
    def decode(cls, token):
        for member in cls:
            if member.value == token:
                return member
        raise InvalidEnumValueError(cls.__name__, token)

    def __str__(self) -> str:
        return self.value


class EnumCodec:
    def __init__(self, enum_type: type[DbEnum]):
        self.enum_type = enum_type

    def encode(self, value) -> str:
        if not isinstance(value, self.enum_type):
            # Tokens passed by callers go through decode so typos are rejected
            value = self.enum_type.decode(value)
        return value.encode()

    def decode(self, token):
        return self.enum_type.decode(token)


class TimestampCodec:
    """
    Stores datetimes in a `timestamp` column as naive UTC.

    Inputs must be timezone-aware. Decoded values are UTC-aware.
    """

    def encode(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime {value.isoformat()} has no timezone")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def decode(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class FloatCodec:
    """Double precision columns; Decimal or int inputs become float."""

    def encode(self, value) -> float:
        return float(value)

    def decode(self, value) -> float:
        return float(value)
