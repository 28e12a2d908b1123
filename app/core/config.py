"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (bot token, Supabase credentials, etc.)
- Reports missing secrets instead of crashing on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Secrets are optional here so the app can boot and explain what is missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Telegram Bot API
    TELEGRAM_BOT_TOKEN: Optional[str] = Field(
        default=None,
        description="Bot token issued by BotFather"
    )
    TELEGRAM_API_BASE: str = Field(
        default="https://api.telegram.org",
        description="Telegram Bot API base URL"
    )
    TELEGRAM_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout in seconds for a single Bot API call"
    )
    WEBHOOK_URL: Optional[str] = Field(
        default=None,
        description="Public URL Telegram should post updates to"
    )

    # Supabase (hosted table store)
    SUPABASE_URL: Optional[str] = Field(
        default=None,
        description="Supabase project URL"
    )
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(
        default=None,
        description="Supabase service role key"
    )

    # Bot behaviour
    BROADCAST_DELAY_SECONDS: float = Field(
        default=0.05,
        description="Pause between announcement sends to stay under Telegram rate limits"
    )
    INVITE_LINK_NAME: str = Field(
        default="Bot Kullanıcıları",
        description="Name given to generated channel invite links"
    )
    MARKET_DATA_SEED: Optional[int] = Field(
        default=None,
        description="Seed for the mock market data generator"
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
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @field_validator("BROADCAST_DELAY_SECONDS")
    @classmethod
    def validate_broadcast_delay(cls, v: float) -> float:
        """Negative sleeps make no sense."""
        if v < 0:
            raise ValueError("BROADCAST_DELAY_SECONDS must be >= 0")
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


REQUIRED_SETTINGS = ("TELEGRAM_BOT_TOKEN", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")


def get_missing_settings(config: Optional[Settings] = None) -> List[str]:
    """
    Lists required secrets that are not set.

    Args:
        config: Settings to inspect (defaults to the global instance)

    Returns:
        Names of missing settings, empty when fully configured
    """
    config = config or settings
    return [name for name in REQUIRED_SETTINGS if not getattr(config, name)]
