"""Application settings loaded from environment variables."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lighthouse.core.config.enums import Environment


class Settings(BaseSettings):
    """Lighthouse backend configuration.

    Every field can be overridden through an environment variable of the
    same name (case-insensitive), e.g. ``POSTGRES_HOST`` or
    ``STRIPE_TEAM_PRICE_ID``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "light_house"
    POSTGRES_SSLMODE: str = "prefer"
    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="Full async database URL; overrides the POSTGRES_* fields when set",
    )

    db_pool_size: int = 20
    db_pool_max_overflow: int = 40

    # Billing provider price identifiers. Empty means "not configured".
    STRIPE_INDIE_PRICE_ID: str = ""
    STRIPE_TEAM_PRICE_ID: str = ""
    STRIPE_AGENCY_PRICE_ID: str = ""

    @field_validator(
        "STRIPE_INDIE_PRICE_ID", "STRIPE_TEAM_PRICE_ID", "STRIPE_AGENCY_PRICE_ID", mode="before"
    )
    @classmethod
    def _strip_price_id(cls, v: Optional[str]) -> str:
        """Normalize unset price IDs to the empty-string sentinel."""
        return (v or "").strip()

    @property
    def SQLALCHEMY_ASYNC_DATABASE_URI(self) -> str:  # noqa: N802
        """Async SQLAlchemy connection string for asyncpg."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )
