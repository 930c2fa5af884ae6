from functools import lru_cache
from typing import Literal
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Values are read from process environment variables first and then from
    a local ``.env`` file. Secrets use SecretStr so they never show up in
    logs or reprs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Companion Service"
    app_version: str = "0.1.0"
    environment: Literal["local", "dev", "staging", "prod"] = "local"
    debug: bool = False

    # Database
    database_url: SecretStr | None = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo_sql: bool = False

    # Redis (optional - listing cache falls back to process memory)
    redis_url: SecretStr | None = None

    # Listing cache
    cache_default_ttl: int = 60  # seconds
    cache_key_prefix: str = "companion_service"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100
    session_history_default_limit: int = 10

    # Identity provider
    auth_provider: Literal["clerk", "none"] = "none"
    auth_jwks_url: str | None = None
    auth_issuer: str | None = None
    auth_authorized_parties: list[str] = Field(default_factory=list)
    auth_jwks_cache_ttl: int = 3600  # seconds
    auth_leeway_seconds: int = 5

    # Observability
    log_level: int = 20  # INFO by default (DEBUG=10, INFO=20, WARNING=30, ERROR=40)
    log_format: Literal["json", "console"] = "json"

    # Sentry Error Tracking
    sentry_dsn: str | None = None
    sentry_environment: str | None = None
    sentry_sample_rate: float = 1.0
    sentry_traces_sample_rate: float = 0.1

    # CORS Settings
    cors_origins: list[str] = Field(default_factory=list)
    cors_allow_credentials: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
