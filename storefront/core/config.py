from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    APP_NAME: str = "Storefront Ordering API"

    # Database
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    SQLITE_BUSY_TIMEOUT: int = 30

    # Business rules
    STORE_RADIUS: float = 30.0
    REPORT_LIMIT: int = 5

    # Report cache, disabled unless a Redis URL is given
    REDIS_URL: Optional[str] = None
    REPORT_CACHE_SECONDS: int = 30

    RATE_LIMIT_ENABLED: bool = True
    ORDER_RATE_LIMIT: str = "30/minute"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Seeded on startup
    ADMIN_NAME: str = "admin"
    ADMIN_SECRET: str = "admin"

    class Config:
        env_file = ".env"
        extra = "allow"  # This allows extra fields


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
