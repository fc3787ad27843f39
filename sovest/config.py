"""Application configuration."""
from typing import Dict, List
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Environment
    ENVIRONMENT: str = Field(default="development")

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./sovest.db")
    DATABASE_POOL_SIZE: int = Field(default=10)
    DATABASE_MAX_OVERFLOW: int = Field(default=20)
    DATABASE_ECHO: bool = Field(default=False)

    # Redis
    REDIS_URL: str = Field(default="redis://localhost:6379/0")

    # Security
    SECRET_KEY: str = Field(default="change-me-change-me-change-me-change-me", min_length=32)
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_PASSWORD: str = Field(default="admin")

    # Stock data provider
    ALPHA_VANTAGE_API_KEY: str | None = Field(default=None)
    ALPHA_VANTAGE_BASE_URL: str = Field(default="https://www.alphavantage.co/query")
    API_RATE_LIMIT: int = Field(default=5, gt=0)  # requests per minute
    STOCK_API_TIMEOUT: float = Field(default=10.0)
    DEFAULT_STOCKS: Dict[str, str] = Field(default={
        "AAPL": "Apple Inc.",
        "MSFT": "Microsoft Corporation",
        "GOOGL": "Alphabet Inc.",
    })

    # Scoring
    TOP_USERS_LIMIT: int = Field(default=10)

    # Application
    TZ: str = Field(default="America/New_York")
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:8080", "http://localhost:3000"])


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
