"""
Settings for the Capital service, read from the environment or an env file.
"""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Pick the env file for APP_ENV (production or development)."""
    if os.getenv("APP_ENV", "development") == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "WonderPay"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Server (python -m wonderpay)
    host: str = "0.0.0.0"
    port: int = 8000

    # Capital applications store
    database_url: str = "sqlite:///./dev.db"
    applications_page_limit: int = Field(50, ge=1)
    applications_max_page_limit: int = Field(200, ge=1)

    # Loan pricing
    capital_base_interest_rate: float = 0.065
    # Largest schedule the calculate endpoint will build for one request
    capital_max_term_months: int = Field(1200, ge=1)

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
