"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (Dramatiq broker and domain event channel)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = "logs/commission_engine.log"

    # Commission engine
    hierarchy_max_depth: int = Field(
        default=5, ge=1, le=5,
        description="Ancestors that receive a share of the CPA pool",
    )
    category_config_path: str | None = Field(
        default=None,
        description="Optional JSON file replacing the built-in category tables",
    )

    # Domain event outbox dispatch
    event_channel_prefix: str = "commission_engine.events"
    event_dispatch_batch_size: int = Field(
        default=100, gt=0, description="Outbox rows drained per dispatch run"
    )
    event_dispatch_interval_seconds: int = Field(
        default=5, ge=1, description="Scheduler interval for outbox dispatch"
    )
    event_dispatch_max_attempts: int = Field(
        default=10, gt=0,
        description="Failed publish attempts before an event is parked",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG must be False in production environment. "
                "Set DEBUG=false in your .env file."
            )
        return self

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(
            ("postgresql://", "postgresql+asyncpg://", "sqlite+aiosqlite://")
        ):
            raise ValueError(
                "DATABASE_URL must start with postgresql://, "
                "postgresql+asyncpg:// or sqlite+aiosqlite://"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        level = v.upper()
        if level not in {
            "TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"
        }:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def async_database_url(self) -> str:
        """Database URL with the async driver selected."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        return self.database_url


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
