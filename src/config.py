"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gemini API
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Application
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("app_env", "node_env"),
    )
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("app_port", "port"),
    )
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "*"

    # Rate limiting (fixed window per client address)
    rate_limit_window_ms: int = 900_000
    rate_limit_max_requests: int = 100

    # Chat sessions
    session_max_idle_seconds: int = 3600
    history_window: int = 10

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
