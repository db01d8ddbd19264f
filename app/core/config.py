"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (database URL, Twilio credentials, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./grouptext.db",
        description="SQLAlchemy async database URL"
    )

    # Twilio
    TWILIO_ACCOUNT_SID: Optional[str] = Field(
        default=None,
        description="Twilio account SID"
    )
    TWILIO_API_KEY_SID: Optional[str] = Field(
        default=None,
        description="Twilio API key SID used for basic auth"
    )
    TWILIO_API_KEY_SECRET: Optional[str] = Field(
        default=None,
        description="Twilio API key secret used for basic auth"
    )
    TWILIO_BASE_URL: str = Field(
        default="https://api.twilio.com/2010-04-01",
        description="Twilio REST API base URL"
    )
    SERVER_NUMBER: Optional[str] = Field(
        default=None,
        description="Phone number messages are sent from"
    )
    CLIENT_NUMBER: Optional[str] = Field(
        default=None,
        description="Phone number that receives the startup notification"
    )
    STARTUP_NOTIFICATION: bool = Field(
        default=True,
        description="Send a text to CLIENT_NUMBER when the server starts"
    )

    # Conversation rules
    DEFAULT_REGION: str = Field(
        default="US",
        description="Region used to parse phone numbers without a country code"
    )
    MAX_NAME_LENGTH: int = Field(
        default=20,
        description="Maximum length of a user's display name"
    )
    PENDING_ACTION_TTL_SECONDS: int = Field(
        default=300,
        description="Age after which a pending action is swept"
    )
    PENDING_ACTION_SWEEP_INTERVAL_SECONDS: int = Field(
        default=60,
        description="How often the pending action sweep runs"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("TWILIO_API_KEY_SECRET")
    @classmethod
    def validate_twilio_secret(cls, v, info: ValidationInfo):
        """Ensure Twilio credentials are set in production."""
        if info.data.get("ENVIRONMENT") == "production" and not v:
            raise ValueError("TWILIO_API_KEY_SECRET is required in production environment")
        return v

    @field_validator("PENDING_ACTION_TTL_SECONDS", "PENDING_ACTION_SWEEP_INTERVAL_SECONDS")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be a positive number of seconds")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is required")

    if settings.is_production:
        if not settings.TWILIO_ACCOUNT_SID:
            errors.append("TWILIO_ACCOUNT_SID is required in production")
        if not settings.TWILIO_API_KEY_SID:
            errors.append("TWILIO_API_KEY_SID is required in production")
        if not settings.SERVER_NUMBER:
            errors.append("SERVER_NUMBER is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
