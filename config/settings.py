"""
Application Settings - Centralized configuration using pydantic-settings.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # MongoDB
    DATABASE_URL: str = "mongodb://localhost:27017/myapp"
    MONGO_DB: str = "myapp"
    USERS_COLLECTION: str = "users"
    # Reject malformed ObjectIds with 400 instead of treating them as missing
    STRICT_OBJECT_IDS: bool = False

    # Web client
    FRONTEND_URL: str = "http://localhost:3000"
    API_URL: str = "http://localhost:3000"

    # Request limits
    RATE_LIMIT_MAX: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    MAX_BODY_BYTES: int = 10 * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


# Convenience export
settings = get_settings()
