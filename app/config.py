from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=BASE_DIR / ".env", env_file_encoding="utf-8")

    # Supabase (Postgres + PostgREST + auth)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    OPPORTUNITIES_TABLE: str = "investment_opportunities"

    # Pagination
    SEARCH_DEFAULT_LIMIT: int = 10
    LISTING_DEFAULT_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 50

    # Status used when a search request does not name one
    DEFAULT_PUBLIC_STATUS: str = "active"

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS for frontend
    CORS_ALLOW_ORIGINS: list[str] = ["*"]


settings = Settings()
