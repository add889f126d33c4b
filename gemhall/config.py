"""
Runtime settings, read from GEMHALL_* environment variables or a .env file.

Rule constants (gem cap, winning points, ...) live in engine_core.rules
and are not configurable.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GEMHALL_", env_file=".env")

    # Seconds a computer player "thinks" before each move (0 disables)
    ai_think_time: float = 0.5
    # Upper bound on consecutive computer turns in one chain
    max_chain_turns: int = 500

    log_level: str = "INFO"
    default_difficulty: str = "medium"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8000
    allowed_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
