"""Exception hierarchy for the copy-trading persistence layer."""


class CopyTradingError(Exception):
    """Base exception for all copytrading errors."""


class StoreError(CopyTradingError):
    """The store reported a failure (connectivity, constraint, timeout...)."""


class DuplicateKeyError(StoreError):
    """An insert violated primary-key uniqueness."""


class NotFoundError(StoreError):
    """An update matched no row."""

    def __init__(self, table_name: str, key: dict):
        self.table_name = table_name
        self.key = key
        super().__init__(f"No row in {table_name} matches {key}")


class SchemaMismatchError(CopyTradingError):
    """The live table does not match its declared schema."""

    def __init__(self, table_name: str, problems: list[str]):
        self.table_name = table_name
        self.problems = problems
        super().__init__(
            f"Table {table_name} does not match its schema: " + "; ".join(problems)
        )


class InvalidEnumValueError(CopyTradingError, ValueError):
    """A token does not map to any variant of the enum."""

    def __init__(self, enum_name: str, token):
        self.enum_name = enum_name
        self.token = token
        super().__init__(f"{token!r} is not a valid {enum_name}")


class UnconstrainedDeleteError(CopyTradingError, ValueError):
    """A delete was requested with a filter that has no predicates."""

    def __init__(self, table_name: str):
        self.table_name = table_name
        super().__init__(f"Refusing to delete from {table_name} without a filter")
