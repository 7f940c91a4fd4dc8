"""Configuration using Pydantic Settings"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SAMPLE_PATH = Path(__file__).parent / "data" / "sample.json"


class Settings(BaseSettings):
    """Application configuration loaded from TRACKER_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    app_name: str = "Finance Tracker"
    log_level: str = "INFO"
    log_json: bool = False

    currency: str = "BRL"
    load_sample_data: bool = False
    sample_data_path: Path = DEFAULT_SAMPLE_PATH

    # Format version stamped on export snapshots
    export_version: str = "1.0.0"

    # Unread and read alerts kept by a store, oldest dropped first
    max_notifications: int = 50


settings = Settings()
