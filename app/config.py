"""
Application Configuration
"""

from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    database_url: Optional[str] = None
    db_statement_timeout_ms: int = 5000  # PostgreSQL only

    # Environment
    environment: str = "development"

    # Availability input validation
    availability_max_horizon_days: int = 183  # ~6 months ahead

    # Matching Engine
    # "overlap_start": hour of day taken from the overlap start (default)
    # "date": hour taken from the bare calendar date (always midnight)
    time_of_day_source: Literal["overlap_start", "date"] = "overlap_start"

    # Stored match maintenance
    match_retention_days: int = 30
    stale_match_cleanup_interval_hours: int = 6

    # Sentry Error Tracking
    sentry_dsn: Optional[str] = None
    sentry_environment: Optional[str] = None  # Defaults to environment setting

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
