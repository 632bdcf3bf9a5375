"""
Format Fixer Configuration

All environment variables and settings for the text repair service.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from format_fixer.models.format import FormatOptions


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # APP
    # ==========================================================================
    app_name: str = "Format Fixer"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # FORMATTING DEFAULTS
    # ==========================================================================
    # Hosts persist these per user; the service only reads them.
    strip_quote_emphasis: bool = False
    uncensor: bool = True
    promote_quote_emphasis: bool = False

    # ==========================================================================
    # LIMITS
    # ==========================================================================
    max_input_chars: int = 20_000
    format_rate_limit_rpm: int = 120

    # ==========================================================================
    # SERVER
    # ==========================================================================
    cors_origins: str = "*"
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def format_options(self) -> FormatOptions:
        """Default pipeline options for requests that don't send their own."""
        return FormatOptions(
            strip_quote_emphasis=self.strip_quote_emphasis,
            uncensor=self.uncensor,
            promote_quote_emphasis=self.promote_quote_emphasis,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
