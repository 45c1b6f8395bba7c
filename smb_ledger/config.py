"""
Application configuration.

All configuration is loaded from environment variables.
Connection strings and provider URLs never live in code.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "SMB Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/smb_ledger"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "console").lower()

    # Bookkeeping
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "ZAR")

    # Bank feed provider
    BANK_FEED_URL: str = os.getenv(
        "BANK_FEED_URL", "https://api.bankfeed.example/v1"
    )
    BANK_FEED_TIMEOUT: float = float(os.getenv("BANK_FEED_TIMEOUT", "30"))
    BANK_SYNC_LOOKBACK_DAYS: int = int(
        os.getenv("BANK_SYNC_LOOKBACK_DAYS", "90")
    )

    # Reconciliation
    AUTO_MATCH_THRESHOLD: Decimal = Decimal(
        os.getenv("AUTO_MATCH_THRESHOLD", "0.85")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls, so environment variables are read once.
    """
    return Settings()
