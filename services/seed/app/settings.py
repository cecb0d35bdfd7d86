from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class SeedSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    postgres_url: str
    # asyncpg ssl mode; hosted databases require TLS.
    postgres_ssl: str = "require"
    seed_route: str = "/seed"
    hash_rounds: int = 10
    log_level: str = "info"

    otel_enabled: bool = False


SETTINGS = SeedSettings()
