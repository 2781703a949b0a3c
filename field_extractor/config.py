"""
Field Extractor settings, overridable through FIELD_EXTRACTOR_* environment variables.
"""
import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="FIELD_EXTRACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application Info
    APP_TITLE: str = "Field Extractor"
    LOG_LEVEL: str = "INFO"

    # Server
    SERVER_NAME: str = "127.0.0.1"
    SERVER_PORT: int = 7860

    # Export gate; set False where the surrounding deployment forbids downloads
    EXPORT_ENABLED: bool = True
    EXPORT_DIR: Path = Path(tempfile.gettempdir())

    # Preview
    PREVIEW_COUNTS: list[int] = [3, 5, 10]
    DEFAULT_PREVIEW_COUNT: int = 3
    PREVIEW_TRUNCATE: int = 50

    # Comparison
    SAMPLE_LIMIT: int = 3


settings = Settings()
