"""
Application configuration.

Uses pydantic-settings to load values from environment variables / .env file.
Secrets (bot token, quoting API key) come from .env and are never hardcoded.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore unknown env vars
    )

    # ── Quoting API ───────────────────────────────────────────
    quote_api_base_url: str = "http://localhost:8000/api"
    quote_api_key: str = ""                 # sent as Bearer token when set
    quote_api_timeout: float = 30.0         # seconds per request
    coverage_type: str = "homeowners"

    # ── Telegram ──────────────────────────────────────────────
    telegram_bot_token: str = ""
    dashboard_url: str = "http://localhost:3000"  # web app that hosts /dashboard

    # ── Conversation pacing (seconds) ────────────────────────
    # Purely cosmetic: lets the typing indicator show before each reply.
    start_delay: float = 0.5
    reveal_delay: float = 0.8
    answer_delay: float = 0.8
    settle_delay: float = 1.5

    # ── App ───────────────────────────────────────────────────
    log_level: str = "INFO"


# Singleton, import this wherever config is needed
settings = Settings()
