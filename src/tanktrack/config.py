"""
Application configuration.

Uses pydantic-settings to load values from environment variables / .env file.
All secrets (DB password, bot token, API key) come from .env — never hardcoded.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore unknown env vars
    )

    # ── Database ──────────────────────────────────────────────
    postgres_db: str = "postgres"
    postgres_user: str = "postgres"
    postgres_password: str = "password"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    # Full SQLAlchemy URL; overrides the postgres_* fields when set
    # (e.g. "sqlite+aiosqlite:///./tanks.db" for local runs).
    database_url_override: str = ""

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy connection string."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # ── Telegram ──────────────────────────────────────────────
    telegram_bot_token: str = ""

    # ── HTTP API ──────────────────────────────────────────────
    # Shared key expected in the X-Api-Key header. Empty disables the check.
    api_key: str = ""

    # ── Tank catalog ─────────────────────────────────────────
    # Comma-separated tank ids treated as pump pits in addition to the
    # built-in table. Example: EXTRA_PUMP_PIT_IDS=S2-PB-16,S2-PB-17
    extra_pump_pit_ids: str = ""

    @property
    def pump_pit_ids(self) -> frozenset[str]:
        """Parsed, upper-cased set of extra pump-pit ids."""
        if not self.extra_pump_pit_ids:
            return frozenset()
        return frozenset(
            x.strip().upper() for x in self.extra_pump_pit_ids.split(",") if x.strip()
        )

    # ── App ───────────────────────────────────────────────────
    log_level: str = "INFO"
    debug: bool = False


# Shared settings instance
settings = Settings()
