"""
Service configuration.

Settings are read from environment variables prefixed with MOVIE_EDIT_
(and an optional .env file). Nothing else in the service reads the
environment directly.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the movie-edit service."""

    model_config = SettingsConfigDict(
        env_prefix="MOVIE_EDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    upload_dir: str = "./uploads"
    static_prefix: str = "/uploads"
    allowed_extensions: List[str] = Field(default_factory=lambda: [".mp4", ".avi", ".mov"])
    copy_chunk_size: int = 1024 * 1024

    # External tool
    ffmpeg_path: Optional[str] = None
    ffmpeg_timeout_seconds: Optional[float] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
