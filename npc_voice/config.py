"""Application configuration loaded from environment variables and .env file."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCRIPT_PATH = Path(__file__).parent / "data" / "dialogue.txt"


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./dev.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Voice script settings
    VOICE_SCRIPT_PATH: str = str(DEFAULT_SCRIPT_PATH)
    PLACEHOLDER_FALLBACK: Literal["token", "bracket"] = "token"
    RECENT_LINE_MEMORY: int = 3
    RANDOM_SEED: Optional[int] = None


settings = Settings()
