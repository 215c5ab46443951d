# src/copytrading/conftest.py
"""
Pytest configuration and shared fixtures.

Tests are co-located with implementation files using the *_test.py suffix.
Unit tests run against RecordingDatabase; integration tests need a
Postgres server reachable through DATABASE_URL and are skipped without one.
"""

import os

# Set environment BEFORE importing any app modules
os.environ["COPYTRADING_ENV"] = "test"

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import psycopg
import pytest
from psycopg import sql
from psycopg.rows import dict_row

from copytrading.config import config
from copytrading.db import Database
from copytrading.position import Position, PositionRepository, PositionType
from copytrading.provider import Provider, ProviderRepository, ProviderStatus
from copytrading.subscription import (
    Subscription,
    SubscriptionRepository,
    SubscriptionStatus,
)

T0 = datetime(2024, 3, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)

# =============================================================================
# Recording Database (unit tests)
# =============================================================================


class RecordingCursor:
    def __init__(self, database: "RecordingDatabase"):
        self.database = database
        self.rowcount = -1

    async def execute(self, query, params=None):
        self.rowcount = await self.database.execute(query, params)


class RecordingDatabase:
    """
    Stand-in for Database that records every statement.

    `rowcount` is returned by execute(), `rows` by fetch_all() (or a
    callable taking the query), and `error`, when set, is raised by every
    call instead.
    """

    def __init__(self):
        self.calls = []
        self.rowcount = 1
        self.rows = []
        self.error = None
        self.refs = 0

    def retain(self):
        self.refs += 1
        return self

    async def release(self):
        self.refs -= 1

    async def open(self):
        pass

    def _record(self, query, params):
        self.calls.append((query, params))
        if self.error is not None:
            raise self.error

    async def execute(self, query, params=None) -> int:
        self._record(query, params)
        return self.rowcount

    async def fetch_all(self, query, params=None) -> list[dict]:
        self._record(query, params)
        if callable(self.rows):
            return self.rows(query)
        return list(self.rows)

    @asynccontextmanager
    async def cursor(self):
        yield RecordingCursor(self)


@pytest.fixture
def recording_db() -> RecordingDatabase:
    return RecordingDatabase()


# =============================================================================
# Database Fixtures (integration tests)
# =============================================================================


MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"


@pytest.fixture(scope="session")
def test_db():
    """
    Recreate the DATABASE_URL database from migrations/ and yield its URL.

    The database named in the URL is dropped, so point it at a throwaway one.
    """
    if not config.database_url:
        pytest.skip("DATABASE_URL is not configured")

    server_url, _, db_name = config.database_url.rpartition("/")
    db_name = db_name.split("?")[0]
    migrations = sorted(MIGRATIONS_DIR.glob("*.sql"))
    if not migrations:
        raise FileNotFoundError(f"No migrations in {MIGRATIONS_DIR}")

    with psycopg.connect(f"{server_url}/postgres", autocommit=True) as admin:
        admin.execute(
            "SELECT pg_terminate_backend(pid) FROM pg_stat_activity"
            " WHERE datname = %s AND pid <> pg_backend_pid()",
            (db_name,),
        )
        admin.execute(sql.SQL("DROP DATABASE IF EXISTS {}").format(sql.Identifier(db_name)))
        admin.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(db_name)))

    with psycopg.connect(config.database_url) as conn:
        for migration in migrations:
            conn.execute(migration.read_text())

    yield config.database_url


@pytest.fixture
async def db_connection(test_db):
    """
    Provide a database connection with transaction rollback.

    Each test runs in a transaction that is rolled back at the end,
    ensuring tests don't affect each other.
    """
    conn = await psycopg.AsyncConnection.connect(test_db)

    # Clean slate: truncate all tables before each test
    async with conn.cursor() as cur:
        await cur.execute(
            """
            TRUNCATE copy_trading_provider, copy_trading_subscription,
                     copy_trading_position
            """
        )
    await conn.commit()

    async with conn.transaction(force_rollback=True):
        yield conn

    await conn.close()


@pytest.fixture
async def db_cursor(db_connection):
    """Provide a cursor for direct SQL operations in tests."""
    async with db_connection.cursor(row_factory=dict_row) as cur:
        yield cur


@pytest.fixture
def database(db_connection):
    """A Database whose every operation runs on the test connection."""
    database = Database(config.postgres_settings(), "copytrading-test")
    database.set_connection_override(db_connection)
    yield database
    database.clear_connection_override()


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
async def provider_repo(database):
    repo = ProviderRepository(database)
    await repo.verify_schema()
    return repo


@pytest.fixture
async def subscription_repo(database):
    repo = SubscriptionRepository(database)
    await repo.verify_schema()
    return repo


@pytest.fixture
async def position_repo(database):
    repo = PositionRepository(database)
    await repo.verify_schema()
    return repo


# =============================================================================
# Record Fixtures
# =============================================================================


def _provider(id="p1", **overrides) -> Provider:
    values = {
        "id": id,
        "trader_id": "t1",
        "account_id": "a1",
        "status": ProviderStatus.ACTIVE,
        "create_date": T0,
    }
    values.update(overrides)
    return Provider(**values)


def _subscription(id="s1", **overrides) -> Subscription:
    values = {
        "id": id,
        "provider_id": "p1",
        "trader_id": "t2",
        "account_id": "a2",
        "status": SubscriptionStatus.ACTIVE,
        "copy_trading_coefficient": 1.5,
        "pl_force_stop_loss": -250.0,
    }
    values.update(overrides)
    return Subscription(**values)


def _position(id="pos1", **overrides) -> Position:
    values = {
        "id": id,
        "provider_id": "p1",
        "subscription_id": "s1",
        "source_position_id": f"src-{id}",
        "position_type": PositionType.MARKET,
    }
    values.update(overrides)
    return Position(**values)


@pytest.fixture
def make_provider():
    """Factory for Provider records; keyword arguments override defaults."""
    return _provider


@pytest.fixture
def make_subscription():
    return _subscription


@pytest.fixture
def make_position():
    return _position


@pytest.fixture
def sample_provider() -> Provider:
    return _provider()


@pytest.fixture
def sample_subscription() -> Subscription:
    return _subscription()


@pytest.fixture
def sample_positions() -> list[Position]:
    return [_position(f"pos{i}") for i in range(1, 4)]
