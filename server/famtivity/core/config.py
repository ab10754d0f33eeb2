"""Configuration settings for the Famtivity data-access service."""

from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    """Application settings with Pydantic validation."""

    # Hosted backend settings (not validated here; the backend fails on first use)
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
        description="Hosted backend endpoint URL"
    )

    supabase_anon_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
        description="Public (anon) API key for the hosted backend"
    )

    # Direct relational connection; selects the SQL backend when set
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL"),
        description="Async SQLAlchemy database URL"
    )

    request_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices("REQUEST_TIMEOUT_SECONDS"),
        description="Timeout applied to hosted backend HTTP calls"
    )

    # Environment settings
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT"),
        description="Application environment"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
        description="Application log level"
    )

    # OAuth settings
    oauth_redirect_production: str = Field(
        default="https://famtivity.com/dashboard",
        validation_alias=AliasChoices("OAUTH_REDIRECT_PRODUCTION"),
        description="OAuth callback URL used in production"
    )

    oauth_redirect_local: str = Field(
        default="http://localhost:3000/dashboard",
        validation_alias=AliasChoices("OAUTH_REDIRECT_LOCAL"),
        description="OAuth callback URL used outside production"
    )

    oauth_scopes: str = Field(
        default="email profile",
        validation_alias=AliasChoices("OAUTH_SCOPES"),
        description="Scopes requested from the OAuth provider"
    )

    # CORS settings
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000", "https://famtivity.com"],
        validation_alias=AliasChoices("CORS_ORIGINS"),
        description="Allowed CORS origins"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST"),
        description="Server host"
    )

    port: int = Field(
        default=8000,
        validation_alias=AliasChoices("PORT"),
        description="Server port"
    )

    # Observability settings
    otlp_endpoint: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OTLP_ENDPOINT"),
        description="OTLP collector endpoint for traces and metrics"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_environments = ["development", "staging", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def debug(self) -> bool:
        """Return True if in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Return True if in production mode."""
        return self.environment == "production"

    @property
    def oauth_redirect_url(self) -> str:
        """Return the OAuth callback URL for the current environment."""
        if self.is_production:
            return self.oauth_redirect_production
        return self.oauth_redirect_local

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
    }


# Global settings instance
settings = Settings()
