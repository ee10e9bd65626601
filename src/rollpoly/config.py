from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ROLLPOLY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    server_name: str = "rollpoly"
    log_level: str = "INFO"

    # Upper bounds on work a single tool call may request.
    max_repeat: int = 100
    max_dice: int = 1000
    default_stats_rolls: int = 1000
    max_stats_rolls: int = 100_000


settings = Settings()
