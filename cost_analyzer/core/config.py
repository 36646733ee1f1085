"""
Configuration module for loading environment variables.
All tunables for pricing, caching and rate limiting are loaded from the environment.
"""
import os
from typing import List


def _parse_bool(value: str) -> bool:
    """Interpret common truthy strings from the environment."""
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_list(value: str) -> List[str]:
    """Split a comma-separated environment value into a clean list."""
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Config:
    """Application configuration loaded from environment variables."""

    # Provider reference service (empty means embedded catalogue only)
    PROVIDER_SERVICE_URL: str = os.getenv("PROVIDER_SERVICE_URL", "").rstrip("/")
    REFERENCE_DATA_TIMEOUT_SECONDS: float = float(os.getenv("REFERENCE_DATA_TIMEOUT_SECONDS", "10"))

    # Cache Configuration
    PRICING_CACHE_TTL_SECONDS: int = int(os.getenv("PRICING_CACHE_TTL_SECONDS", "86400"))  # 24 hours
    RECOMMENDATION_CACHE_TTL_SECONDS: int = int(os.getenv("RECOMMENDATION_CACHE_TTL_SECONDS", "3600"))  # 1 hour

    # Pricing Configuration
    DEFAULT_PRICED_PROVIDERS: List[str] = _parse_list(
        os.getenv("DEFAULT_PRICED_PROVIDERS", "aws,azure,gcp")
    )
    CLAMP_SAVINGS_ESTIMATE: bool = _parse_bool(os.getenv("CLAMP_SAVINGS_ESTIMATE", "true"))

    # Rate limiting (requests per client per window)
    RATE_LIMIT_PER_WINDOW: int = int(os.getenv("RATE_LIMIT_PER_WINDOW", "100"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))  # 15 minutes

    @classmethod
    def validate(cls) -> None:
        """
        Validates that configuration values are usable.

        Raises:
            ValueError: If any configuration value is missing or invalid.
        """
        if cls.PROVIDER_SERVICE_URL and not cls.PROVIDER_SERVICE_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"PROVIDER_SERVICE_URL must be a valid URL (got: {cls.PROVIDER_SERVICE_URL})"
            )
        if cls.REFERENCE_DATA_TIMEOUT_SECONDS <= 0:
            raise ValueError("REFERENCE_DATA_TIMEOUT_SECONDS must be positive")
        if cls.PRICING_CACHE_TTL_SECONDS < 0 or cls.RECOMMENDATION_CACHE_TTL_SECONDS < 0:
            raise ValueError("Cache TTL values must not be negative")
        if not cls.DEFAULT_PRICED_PROVIDERS:
            raise ValueError("DEFAULT_PRICED_PROVIDERS must name at least one provider")
        if cls.RATE_LIMIT_PER_WINDOW < 1 or cls.RATE_LIMIT_WINDOW_SECONDS < 1:
            raise ValueError("Rate limit settings must be positive")


config = Config()
