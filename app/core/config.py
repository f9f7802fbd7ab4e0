import os
from typing import Optional

from pydantic_settings import BaseSettings


def get_default_database_url() -> str:
    """Get default database URL based on environment."""
    # Check for Supabase/Postgres URL first
    if os.environ.get("DATABASE_URL"):
        return os.environ.get("DATABASE_URL")
    # Check if we're in a serverless environment (Vercel, AWS Lambda, etc.)
    if os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME"):
        # Use /tmp for SQLite in serverless (ephemeral but writable)
        return "sqlite:////tmp/raw_dog_planner.db"
    return "sqlite:///./raw_dog_planner.db"


class Settings(BaseSettings):
    APP_NAME: str = "Raw Dog Meal Planner API"
    DATABASE_URL: str = get_default_database_url()
    LOG_LEVEL: str = "INFO"

    # Planner defaults
    DEFAULT_MEALS_PER_DAY: int = 2
    DEFAULT_DURATION_DAYS: int = 7
    PLANNER_HISTORY_LIMIT: Optional[int] = None  # None keeps every snapshot
    PLANNER_SESSION_IDLE_MINUTES: int = 120
    PLANNER_MAX_SESSIONS: int = 500
    CURRENCY: str = "GBP"

    # Supabase settings
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_KEY: str = ""  # For server-side operations
    SUPABASE_JWT_SECRET: str = ""   # For verifying JWTs

    class Config:
        env_file = ".env"


settings = Settings()
