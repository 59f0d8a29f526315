from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "HR Back Office"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://backoffice:backoffice@db:5432/backoffice"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Request workflow
    store_page_size: int = 100
    default_list_limit: int = 25
    default_document_language: str = "en"
    default_approver: str = "HR"
    storage_public_base_url: str = "http://localhost:8000/files"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
