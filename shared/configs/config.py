"""
Application configuration using Pydantic settings.
"""
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Stock Valuation Scanner"
    debug: bool = False
    environment: str = "development"

    # Web server
    host: str = "0.0.0.0"
    port: int = 8080

    # Quote provider (Yahoo Finance public endpoints)
    quote_provider_base_url: str = "https://query1.finance.yahoo.com"
    request_timeout_seconds: float = 10.0
    fetch_retry_attempts: int = 3
    user_agent: str = "Mozilla/5.0 (compatible; stock-valuation-scanner/1.0)"

    # Scanning
    max_scan_symbols: int = 50  # Cap on unique tickers per scan request
    cache_max_age_seconds: int = 60  # Cache-Control max-age on API responses

    # Valuation assumptions (YAML file overriding the built-in defaults)
    assumptions_file: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_dir: Optional[str] = None  # Directory for <service>.log files; console only when unset

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"  # Allow extra fields from .env file
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance
    """
    return Settings()
