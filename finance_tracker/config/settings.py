"""
Configuration Management for the Finance Tracker

Every option comes from environment variables or a .env file, read by
pydantic-settings.

DESIGN DECISION: Nothing outside this module reads the environment.
The storage backend is chosen by configuration, so the same store code runs
against a local JSON file, memory (for demos/tests) or Google Sheets.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finance_tracker.models.document import DEFAULT_CATEGORIES


class StorageSettings(BaseSettings):
    """Which persistence backend to use and where the document lives."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["file", "memory", "google_sheets"] = Field(
        default="file",
        description="Persistence backend"
    )
    data_dir: str = Field(
        default="data",
        description="Directory for the file backend"
    )
    document_key: str = Field(
        default="finance-app-data",
        min_length=1,
        description="Key the document is stored under"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )
    documents_sheet_name: str = Field(
        default="FinanceData",
        description="Name of the sheet holding stored documents"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Display and behaviour of the tracker itself.

    Unprefixed variables, e.g. CURRENCY_CODE=EUR or DUE_SOON_DAYS=3.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Display
    currency_code: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 code amounts are shown in"
    )
    default_categories: str = Field(
        default=",".join(DEFAULT_CATEGORIES),
        description="Comma-separated transaction categories for new documents"
    )

    # Bills
    due_soon_days: int = Field(
        default=7,
        ge=0,
        le=60,
        description="Unpaid bills due within this many days are flagged"
    )

    @property
    def default_categories_list(self) -> list[str]:
        """Get default categories as a list."""
        return [cat.strip() for cat in self.default_categories.split(",") if cat.strip()]


class Settings(BaseSettings):
    """
    Entry point for all settings.

    Each section is built on access from the current environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so that Google Sheets credentials are
    # only required when that backend is selected.

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Shared Settings instance.

    Tests call get_settings.cache_clear() after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict:
    """
    Try to load each settings section.

    Returns a dict of {setting_name: is_valid} plus "<name>_error" messages.
    Google Sheets is only checked when it is the selected backend.
    """
    results = {}

    settings = get_settings()

    try:
        storage = settings.storage
        results["storage"] = True
    except Exception as e:
        storage = None
        results["storage"] = False
        results["storage_error"] = str(e)

    if storage is not None and storage.backend == "google_sheets":
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
