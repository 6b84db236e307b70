"""
Application Configuration Module

This module defines all configuration settings for the note store, its sync
engine and the reference remote service.
Settings are loaded from environment variables (via .env file) using Pydantic.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide configuration settings.

    All settings can be overridden via environment variables.
    The .env file is automatically loaded if present.
    """
    # === Application Metadata ===
    PROJECT_NAME: str = "Field Notes"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"  # API version prefix for the reference remote service

    # === Local Store ===
    DATABASE_URL: str = "sqlite:///./field_notes.db"

    # === Reference Remote Service ===
    # Only used when serving the mock remote with scripts/serve_remote.py
    REMOTE_DATABASE_URL: str = "sqlite:///./remote_notes.db"

    # === Remote Client ===
    REMOTE_BASE_URL: str = "http://127.0.0.1:8000/api/v1"
    REMOTE_TIMEOUT: float = 10.0        # Seconds per request to the notes API
    CONNECTIVITY_TIMEOUT: float = 3.0   # Seconds for the health probe

    # === Logging ===
    LOG_LEVEL: str = "INFO"

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_file=".env",        # Load environment variables from .env file
        case_sensitive=True,    # Environment variable names must match case
        extra="ignore"          # Ignore extra environment variables not defined here
    )

# Create a single global settings instance
# Factories fall back to it when no explicit Settings object is passed
settings = Settings()
