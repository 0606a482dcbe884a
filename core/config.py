"""
Configuration Module
====================

Application settings loaded from environment variables and ``.env``:
logging, output locations, export titles and the remote preview endpoint.
The merge core itself reads none of these; front ends and the export layer do.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """
    Application settings (Pydantic ``BaseSettings``, env-driven).

    Attributes:
        LOG_LEVEL: level applied to the project logger by front ends
        OUTPUT_DIR: where CLI/API runs write exports and JSON
        EXPORT_TITLE: title used for exports and preview copies
        EXPORT_FILENAME: filename of the formatted workbook
        EXPORT_BANNER_TEXT: text placed in the logo/banner area
        PREVIEW_ENDPOINT_URL: "create viewable copy" endpoint; empty disables preview
        PREVIEW_API_TOKEN: optional bearer token for that endpoint
        REQUEST_TIMEOUT: preview request timeout, seconds
        PREVIEW_RETRY_*: retry settings for preview publishing
    """
    LOG_LEVEL: str = "INFO"
    OUTPUT_DIR: str = "output"
    EXPORT_TITLE: str = "Combined Counsellors Data"
    EXPORT_FILENAME: str = "Combined_Student_Counsellor_Data.xlsx"
    EXPORT_BANNER_TEXT: str = "LOGO SPACE - Insert Logo Here"
    PREVIEW_ENDPOINT_URL: str = ""
    PREVIEW_API_TOKEN: str = ""
    REQUEST_TIMEOUT: int = 60
    PREVIEW_RETRY_MAX_ATTEMPTS: int = 3
    PREVIEW_RETRY_MIN_WAIT_SECONDS: float = 1.0
    PREVIEW_RETRY_MAX_WAIT_SECONDS: float = 8.0

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got {v!r}")
        return level

    @field_validator("EXPORT_FILENAME")
    @classmethod
    def validate_export_filename(cls, v: str) -> str:
        name = (v or "").strip()
        if not name.lower().endswith(".xlsx"):
            raise ValueError("EXPORT_FILENAME must end with .xlsx")
        return name

    @field_validator("PREVIEW_RETRY_MAX_ATTEMPTS")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("PREVIEW_RETRY_MAX_ATTEMPTS must be at least 1")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Cached singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the settings singleton, creating it on first call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings (tests use this after changing the environment)."""
    global _settings_instance
    _settings_instance = None
