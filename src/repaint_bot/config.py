"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    api_url: str
    telegram_allowed_user_ids: str | None = None
    chat_provider: str = "backend"
    chat_max_tokens: int = 150
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    transcribe_language: str = "en"
    random_seed: int | None = None
    telegram_timeout: float = 10
    caption_timeout: float = 60
    chat_timeout: float = 30
    render_timeout: float = 300
    transcribe_timeout: float = 60
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_user_ids(raw: str | None) -> set[int] | None:
    """Parse allowed Telegram user IDs from env."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return None
    ids: set[int] = set()
    for chunk in cleaned.split(","):
        value = chunk.strip()
        if not value:
            continue
        if value.isdigit():
            ids.add(int(value))
    return ids or None
