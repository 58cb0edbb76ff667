"""Application configuration using environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server settings
    port: int = 8000
    host: str = "0.0.0.0"
    log_level: str = "INFO"

    # CORS settings
    allowed_origins: str = "*"

    # Required in X-API-Key on /api routes when set
    api_key: Optional[str] = None

    # Faucet settings
    admin_account: str  # required: FAUCET_ADMIN_ACCOUNT
    reserve_account: str = "faucet-reserve"
    initial_reserve: int = 0
    grant_amount: int = 100
    cooldown_seconds: int = 86400

    # Network-level throttling (slowapi)
    rate_limit_enabled: bool = True
    default_rate_limit: str = "100/minute"
    claim_rate_limit: str = "10/minute"

    class Config:
        env_prefix = "FAUCET_"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
