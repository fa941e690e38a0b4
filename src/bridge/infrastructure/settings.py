"""Bridge settings using pydantic-settings.

Everything is read from ``BRIDGE_*`` environment variables (or a ``.env``
file). Defaults target local development against a SQLite file.
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Dialect(StrEnum):
    """Relational store variants the bridge can run against."""

    POSTGRES = "postgres"
    SQLITE = "sqlite"


class DatabaseSettings(BaseSettings):
    """Relational store settings.

    Environment variables:
        BRIDGE_DB_DIALECT: "postgres" or "sqlite" (default: sqlite)
        BRIDGE_DB_SQLITE_PATH: SQLite database file (default: data/local.db)
        BRIDGE_DB_SQLITE_BUSY_TIMEOUT: Seconds to wait on a locked file (default: 5)
        BRIDGE_DB_HOST / _PORT / _DATABASE / _USERNAME / _PASSWORD:
            PostgreSQL connection (defaults: localhost, 5432, bridge, bridge, "")
        BRIDGE_DB_POOL_MIN_CONNECTIONS: Lower pool bound (default: 2)
        BRIDGE_DB_POOL_MAX_CONNECTIONS: Upper pool bound (default: 10)
    """

    model_config = _env("BRIDGE_DB_")

    dialect: Dialect = Field(default=Dialect.SQLITE, description="Store variant")

    sqlite_path: str = Field(
        default="data/local.db",
        description="Path of the SQLite database file",
    )
    sqlite_busy_timeout: float = Field(
        default=5.0,
        description="Seconds a SQLite writer waits for the file lock",
        gt=0,
    )

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    database: str = Field(default="bridge", description="PostgreSQL database")
    username: str = Field(default="bridge", description="PostgreSQL user")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="PostgreSQL password",
    )

    pool_min_connections: int = Field(default=2, ge=1, le=100)
    pool_max_connections: int = Field(default=10, ge=1, le=100)

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Reject a pool whose upper bound is below its lower bound."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Describe the target store without credentials, for logging."""
        if self.dialect is Dialect.SQLITE:
            return f"sqlite:///{self.sqlite_path}"
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class ResolutionSettings(BaseSettings):
    """Group resolution settings.

    Environment variables:
        BRIDGE_DEFAULT_AGENCY_ID: Agency that owns newly observed groups when
            no explicit owner is supplied. Unset means auto-detect.
    """

    model_config = _env("BRIDGE_")

    default_agency_id: int | None = Field(
        default=None,
        description="Operator override for the owning agency of new groups",
        gt=0,
    )


class Settings(BaseSettings):
    """Process-wide settings.

    Environment variables:
        BRIDGE_DEBUG: Emit debug-level events (default: false)
    """

    model_config = _env("BRIDGE_")

    debug: bool = Field(default=False, description="Debug logging")


@lru_cache
def get_settings() -> Settings:
    """Load process settings once."""
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Load store settings once; the engine is built from them."""
    return DatabaseSettings()


def read_default_agency_id() -> int | None:
    """Read the operator override for the default agency.

    Not cached. The value is re-read on every resolution attempt so an
    operator can change it without restarting the bot.
    """
    return ResolutionSettings().default_agency_id
