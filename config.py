"""Application configuration. Environment variables (or a .env file) override defaults."""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Portfolio API"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Mongo connection; leave DATABASE_URL unset to run without a store
    DATABASE_URL: Optional[str] = None
    DATABASE_NAME: str = "portfolio"

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
