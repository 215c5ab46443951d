import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load the appropriate .env file on module import
env = os.environ.get("COPYTRADING_ENV", "development").lower()
env_file = f".env.{env}"
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    # Fall back to the default .env file
    load_dotenv()


@dataclass(frozen=True)
class PostgresSettings:
    """Connection settings handed to a repository by the surrounding service."""

    database_url: str
    pool_min_size: int = 1
    pool_max_size: int = 10
    connect_timeout: float = 30.0


@dataclass
class Config:
    environment: str
    database_url: str | None
    service_name: str
    pool_min_size: int
    pool_max_size: int
    connect_timeout: float

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            environment=env,
            database_url=os.environ.get("DATABASE_URL"),
            service_name=os.environ.get("COPYTRADING_SERVICE_NAME", "copytrading"),
            pool_min_size=int(os.environ.get("DB_POOL_MIN_SIZE", "1")),
            pool_max_size=int(os.environ.get("DB_POOL_MAX_SIZE", "10")),
            connect_timeout=float(os.environ.get("DB_CONNECT_TIMEOUT", "30")),
        )

    def postgres_settings(self) -> PostgresSettings:
        if not self.database_url:
            raise KeyError("DATABASE_URL is not set")
        return PostgresSettings(
            database_url=self.database_url,
            pool_min_size=self.pool_min_size,
            pool_max_size=self.pool_max_size,
            connect_timeout=self.connect_timeout,
        )


config = Config.from_env()
