"""
Core service configuration.

This module provides machine-translation and auto-fill settings
loaded from environment variables.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file in project root
_env_file = Path(__file__).parent.parent.parent.parent.parent / ".env"


class MachineTranslationConfig(BaseSettings):
    """
    Machine-translation provider configuration from environment variables.

    All settings are prefixed with MT_ in environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="MT_",
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "libretranslate"  # libretranslate | google | deepl | openai
    base_url: str = "http://libretranslate:5000"  # LibreTranslate server URL
    api_key: str = ""
    model: str = "gpt-4o-mini"  # OpenAI model name
    timeout_seconds: float = 30.0
    health_timeout_seconds: float = 5.0
    fallback_to_google: bool = False


class AutoFillConfig(BaseSettings):
    """
    Auto-fill orchestration configuration from environment variables.

    All settings are prefixed with AUTO_FILL_ in environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTO_FILL_",
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    concurrency: int = 5  # Max provider calls in flight per run
    call_timeout_seconds: float = 30.0


# Global instances
machine_translation_config = MachineTranslationConfig()
auto_fill_config = AutoFillConfig()
