"""Application configuration using pydantic-settings."""

import warnings
from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "CHANGE-ME-IN-PRODUCTION"
MIN_JWT_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "VibeStorm"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # JWT / Auth
    jwt_secret_key: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="JWT signing secret. MUST be overridden in production.",
    )
    jwt_token_duration_minutes: int = Field(default=1440, gt=0)  # 24 hours

    # Signin brute-force protection
    signin_max_attempts: int = Field(default=5, gt=0)
    signin_window_minutes: int = Field(default=15, gt=0)

    # HTTP
    rate_limit_default: str = "120/minute"
    max_body_bytes: int = Field(default=10 * 1024 * 1024, gt=0)  # 10M
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    @model_validator(mode="after")
    def enforce_jwt_secret_strength(self) -> "Settings":
        """Validate the signing secret for the current environment.

        An empty secret is always rejected. Outside development the placeholder
        and anything shorter than ``MIN_JWT_SECRET_LENGTH`` are rejected too;
        in development a short secret only warns.
        """
        secret = self.jwt_secret_key
        if not secret:
            raise ValueError("jwt_secret_key must not be empty")

        if self.is_development:
            if len(secret) < MIN_JWT_SECRET_LENGTH:
                warnings.warn(
                    f"jwt_secret_key is shorter than {MIN_JWT_SECRET_LENGTH} characters; "
                    "every token it signs is easier to forge",
                    UserWarning,
                    stacklevel=2,
                )
            return self

        if secret == DEFAULT_JWT_SECRET:
            raise ValueError(
                f"jwt_secret_key must be changed from its default value in {self.environment}"
            )
        if len(secret) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(
                f"jwt_secret_key must be at least {MIN_JWT_SECRET_LENGTH} characters "
                f"in {self.environment}"
            )
        return self

    @property
    def token_duration(self) -> timedelta:
        return timedelta(minutes=self.jwt_token_duration_minutes)

    @property
    def signin_window(self) -> timedelta:
        return timedelta(minutes=self.signin_window_minutes)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
