"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from domain.enums import ParsePolicy


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="QueComi", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://postgres@localhost:5432/quecomi",
        description="SQLAlchemy database URL of the hosted meal store",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(default="QueComi API", description="API documentation title")
    api_description: str = Field(
        default="Meal logging backend for the QueComi nutrition assistant",
        description="API documentation description",
    )

    # Meal parsing
    parser_policy: ParsePolicy = Field(
        default=ParsePolicy.STRICT,
        description="How fragments with missing or invalid nutrition labels are handled",
    )
    error_reply_markers: list[str] = Field(
        default=["¡Ups!", "Oops!", "Error", "siesta digestiva"],
        description="Substrings identifying assistant error replies that must not be logged",
    )

    # Day boundaries for summaries
    timezone: str = Field(
        default="America/Argentina/Buenos_Aires",
        description="IANA time zone used to compute the user's calendar day",
    )

    # Request quota
    free_requests: int = Field(
        default=20, ge=0, description="Monthly requests granted to FREE patients"
    )
    low_requests_warning_threshold: int = Field(
        default=5, ge=1, description="Warn FREE patients when this many requests remain"
    )

    # Premium subscriptions
    subscription_days: int = Field(
        default=30, ge=1, description="Length of a PRO/MEDICAL subscription period"
    )
    subscription_warning_days: int = Field(
        default=5, ge=0, description="Notify premium patients this many days before expiry"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("parser_policy", mode="before")
    @classmethod
    def validate_parser_policy(cls, v):
        if isinstance(v, str):
            return ParsePolicy(v.lower())
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT


# Global settings instance
settings = Settings()
