from dataclasses import fields
from datetime import datetime
from enum import Enum
from typing import get_type_hints

from copytrading.schema.codec import DbEnum


class Record:
    """JSON-ready dict conversion for dataclass records."""

    def to_dict(self) -> dict:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, datetime):
                value = value.isoformat()
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict):
        hints = get_type_hints(cls)
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            hint = hints.get(f.name)
            if value is not None and isinstance(hint, type):
                if issubclass(hint, DbEnum):
                    value = hint.decode(value)
                elif issubclass(hint, datetime) and isinstance(value, str):
                    value = datetime.fromisoformat(value)
            kwargs[f.name] = value
        return cls(**kwargs)
