"""Configuration settings for the coupon lookup core."""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COUPON_LOOKUP_",
        case_sensitive=False,
    )

    # Rate limiting
    rate_limit_requests: int = Field(
        default=5,
        description="Maximum menu lookups per caller within the window",
    )
    rate_limit_window_seconds: int = Field(
        default=600,
        description="Length of the trailing rate limit window in seconds",
    )
    rate_limit_cleanup_interval_seconds: int = Field(
        default=60,
        description="How often idle caller histories are swept",
    )

    @field_validator(
        "rate_limit_requests",
        "rate_limit_window_seconds",
        "rate_limit_cleanup_interval_seconds",
    )
    @classmethod
    def require_positive(cls, value: int) -> int:
        """Reject zero or negative limits."""
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rate_limit_window(self) -> timedelta:
        """Return the rate limit window as a timedelta."""
        return timedelta(seconds=self.rate_limit_window_seconds)

    currency_symbol: str = Field(
        default="$",
        min_length=1,
        description="Symbol prefixed to coupon prices lacking one",
    )


@lru_cache
def get_settings() -> Settings:
    """Get application settings singleton (cached)."""
    return Settings()
