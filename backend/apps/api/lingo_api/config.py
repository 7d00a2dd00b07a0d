"""
API configuration.

Application settings loaded from environment variables.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from lingo_database.session import DEFAULT_DATABASE_URL

# Find .env file in project root
_env_file = Path(__file__).parent.parent.parent.parent.parent / ".env"


class Settings(BaseSettings):
    """API settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Lingo API"
    version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    database_url: str = DEFAULT_DATABASE_URL

    cors_origins: list[str] = ["http://localhost:3000"]

    # Operator recorded on history when no X-User-Id header is sent
    default_operator_id: int = 0

    default_page_size: int = 20
    max_page_size: int = 100


settings = Settings()
