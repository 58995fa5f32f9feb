"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Settings are read once and passed explicitly to the clients built from them

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Legacy variable names (MY_ACCOUNT_ID, MY_PRIVATE_KEY, NODE_ENV) accepted as aliases
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
        populate_by_name=True,
    )

    # Hedera operator (also the collection treasury)
    operator_account_id: str = Field(
        "", validation_alias=AliasChoices("OPERATOR_ACCOUNT_ID", "MY_ACCOUNT_ID"),
    )
    operator_private_key: str = Field(
        "", validation_alias=AliasChoices("OPERATOR_PRIVATE_KEY", "MY_PRIVATE_KEY"),
    )
    hedera_network: Literal["testnet", "previewnet", "mainnet"] = "testnet"
    collection_name: str = "Ecolive Hives"
    collection_symbol: str = "HIVE"

    # Pinata
    pinata_jwt: str = ""
    pinata_gateway: str = ""
    pinata_api_url: str = "https://api.pinata.cloud/pinning/pinJSONToIPFS"

    # Hive store
    hive_store_backend: Literal["json", "sql"] = "json"
    hives_path: str = "data/hives.json"
    database_url: str = "sqlite+aiosqlite:///data/hives.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Pending transfers younger than this belong to the purchase still running
    reconcile_grace_seconds: int = 120

    # API
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    frontend_url: str | None = None
    port: int = 3001
    environment: str = Field(
        "development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def allowed_origins(self) -> list[str]:
        """Origins allowed to call the API from a browser."""
        origins = list(self.cors_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
