"""
Negobi Configuration
Core settings for the inventory and field-visit client
"""
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Application Info
    APP_NAME: str = "Negobi Operations API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # API Configuration
    API_V1_STR: str = "/api/v1"
    DOCS_URL: str = "/docs"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Next.js dashboard
    ]

    # Remote backend
    API_BASE_URL: str = "http://localhost:4000/api"
    API_TOKEN: Optional[str] = None
    API_KEY: Optional[str] = None
    API_KEY_EXPIRATION: Optional[datetime] = None
    LANGUAGE: str = "es"
    REQUEST_TIMEOUT: float = 30.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    FETCH_ALL_PAGE_SIZE: int = 100
    FETCH_ALL_MAX_PAGES: int = 500

    # Business rules
    VISIT_DESCRIPTION_MAX_LENGTH: int = 500
    VISIT_DEFAULT_DURATION_MINUTES: int = 60
    VISIT_ASSUMED_DURATION_MINUTES: int = 60
    VISIT_CONFLICT_WINDOW_HOURS: int = 2
    VISIT_UPCOMING_DAYS: int = 7
    LOT_EXPIRY_ALERT_DAYS: int = 30
    LOT_LOW_QUANTITY_THRESHOLD: float = 10
    EXCHANGE_RATE_HISTORY_DAYS: int = 30
    STATISTICS_MAX_WORKERS: int = 5
    TIMEZONE: str = "UTC"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_DIR: Path = Path("logs")
    LOG_FILE: str = "negobi.log"
    ERROR_LOG_FILE: str = "error.log"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are joined with a leading slash"""
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


# Global settings instance
settings = Settings()
