"""Application configuration and environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    storage_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./college_library.db"
    seed_fixtures: bool = True

    # Library rules
    default_loan_days: int = 14

    # Application
    app_name: str = "College Library"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "LIBRARY_",
        "extra": "ignore"
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
