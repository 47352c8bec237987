"""
Settings for the finder engine.
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FinderSettings(BaseSettings):
    """
    Runtime settings read from the environment (or a ``.env`` file).

    Example:
        >>> settings = FinderSettings(DEFAULT_PER_PAGE=50)
        >>> settings.DEFAULT_PER_PAGE
        50
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # --- Basic Environment ---
    DEBUG: bool = True
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # --- Database Core ---
    DATABASE_URL: str | None = None

    # --- Logging ---
    # When enabled, every statement is logged at INFO instead of DEBUG.
    LOG_SQL: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Pagination ---
    DEFAULT_PER_PAGE: int = 20
    MAX_PER_PAGE: int = 500

    @model_validator(mode="after")
    def validate_pagination(self) -> "FinderSettings":
        """Ensures the default page size fits inside the allowed maximum."""
        if self.DEFAULT_PER_PAGE < 1:
            raise ValueError("DEFAULT_PER_PAGE must be at least 1.")
        if self.DEFAULT_PER_PAGE > self.MAX_PER_PAGE:
            raise ValueError("DEFAULT_PER_PAGE cannot exceed MAX_PER_PAGE.")
        return self

    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT == "development"


finder_settings = FinderSettings()
