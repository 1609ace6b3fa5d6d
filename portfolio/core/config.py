"""Application configuration via environment variables (pydantic-settings)."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Portfolio Content Cache"
    LOG_LEVEL: str = "INFO"

    # Upstream portfolio API (Next.js route handlers)
    PORTFOLIO_API_URL: str = "http://localhost:3000/api"
    HTTP_TIMEOUT: float = 10.0

    # Cache (seconds)
    CACHE_TIME: float = 300.0
    STALE_TIME: float = 0.0  # 0 = revalidate in background on every hit
    FILTERED_SKILLS_CACHE_TIME: float = 3600.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

@lru_cache
def get_settings():
    return Settings()

settings = get_settings()
