"""Application configuration powered by Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Strongly typed application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: Literal["dev", "staging", "prod"] = Field(default="dev")
    project_name: str = Field(default="ISO Document Navigator Chat API")
    version: str = Field(default="0.1.0")
    log_level: str = Field(default="INFO")

    answer_service_url: str = Field(default="http://localhost:54321/functions/v1/chat")
    answer_service_headers: dict[str, str] = Field(default_factory=dict)
    # None disables the timeout entirely.
    exchange_timeout_seconds: float | None = Field(default=None, gt=0)

    conversations_db_url: str = Field(default="sqlite+aiosqlite:///./data/conversations.db")
    conversation_title_max_chars: int = Field(default=50, ge=1, le=200)

    fallback_answer: str = Field(default="Désolé, je n'ai pas pu générer de réponse.")
    generic_error_message: str = Field(default="Une erreur est survenue")

    serialize_sends: bool = Field(default=True)
    notification_buffer_size: int = Field(default=50, ge=1, le=1000)
    max_sessions: int = Field(default=1000, ge=1)

    cors_allowed_origins: list[str] = Field(default_factory=list)


@lru_cache
def get_settings() -> AppSettings:
    """Provide a cached singleton settings instance."""

    return AppSettings()
