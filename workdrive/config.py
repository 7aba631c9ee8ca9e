from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from functools import lru_cache

from .adapter import DEFAULT_BASE_URL, DEFAULT_DOWNLOAD_BASE_URL


class Settings(BaseSettings):
    """
    Centralized application configuration with type validation.
    Automatically reads variables from the environment and the .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- General Settings ---
    LOG_LEVEL: str = "INFO"

    # --- WorkDrive Settings ---
    WORKDRIVE_BASE_URL: str = DEFAULT_BASE_URL
    WORKDRIVE_DOWNLOAD_BASE_URL: str = DEFAULT_DOWNLOAD_BASE_URL
    WORKDRIVE_ACCESS_TOKEN: Optional[str] = None
    WORKDRIVE_ROOT_FOLDER_ID: Optional[str] = None
    WORKDRIVE_REQUEST_TIMEOUT: Optional[float] = None  # seconds, None waits forever

    # --- Constants and Computed Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent

    @field_validator("WORKDRIVE_BASE_URL", "WORKDRIVE_DOWNLOAD_BASE_URL")
    @classmethod
    def validate_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"'{value}' is not an http(s) URL")
        return value.rstrip("/")

    @field_validator("WORKDRIVE_REQUEST_TIMEOUT")
    @classmethod
    def validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("WORKDRIVE_REQUEST_TIMEOUT must be positive")
        return value

    @property
    def LOG_FILE(self) -> Path:
        return self.BASE_DIR / "app.log"


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the application settings.
    The first call to this function will initialize the settings.
    """
    return Settings()
