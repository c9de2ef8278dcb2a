"""Configuration for the web edge."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Web edge settings loaded from environment variables."""

    # Backend REST API
    API_URL: str = "http://localhost:3001/api/v1"
    HTTP_TIMEOUT_SECONDS: float = 30.0
    MAX_RETRIES: int = 2

    # Supabase auth (empty or placeholder values select the dev provider)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""

    # Session cookies
    ACCESS_TOKEN_COOKIE: str = "sb-access-token"
    REFRESH_TOKEN_COOKIE: str = "sb-refresh-token"
    COOKIE_SECURE: bool = False

    # Structured JSON logs for deployments
    LOG_JSON: bool = False


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
