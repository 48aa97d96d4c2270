# core/config.py
"""
Configuration settings for the Realty API.
"""
from typing import List, Optional
from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings.
    All settings can be overridden by environment variables or a .env file.
    """
    # --- Application ---
    APP_NAME: str = "Realty API"
    DEBUG: bool = False
    ENV: str = "development"

    # --- Server ---
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    RELOAD: bool = False

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./realty.db"
    ECHO_SQL: bool = False

    # --- CORS ---
    CORS_ORIGINS: List[str] = ["*"]
    CORS_METHODS: List[str] = ["GET", "POST", "OPTIONS"]
    CORS_HEADERS: List[str] = ["Content-Type", "Authorization", "X-User-Id"]

    # --- Logging ---
    LOG_EXCLUDED_PATHS: List[str] = ["/health"]

    # --- CRMLS credentials (names kept compatible with the frontend build) ---
    VITE_CRMLS_CLIENT_ID: Optional[str] = None
    VITE_CRMLS_CLIENT_SECRET: Optional[str] = None
    VITE_CRMLS_API_KEY: Optional[str] = None

    # --- CRMLS upstream ---
    CRMLS_TOKEN_URL: str = "https://api.realtyfeed.com/auth/token"
    CRMLS_PROPERTIES_URL: str = "https://api.realtyfeed.com/properties"
    CRMLS_USER_AGENT: str = "CRMLS-Proxy/1.0"
    CRMLS_TOKEN_TIMEOUT: float = 30.0  # seconds
    CRMLS_LISTINGS_TIMEOUT: float = 45.0  # seconds
    CRMLS_DEFAULT_PER_PAGE: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("VITE_CRMLS_CLIENT_ID", "VITE_CRMLS_CLIENT_SECRET", "VITE_CRMLS_API_KEY")
    def blank_to_none(cls, v):
        # An exported-but-empty variable counts as missing
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def has_crmls_credentials(self) -> bool:
        return bool(self.VITE_CRMLS_CLIENT_ID and self.VITE_CRMLS_CLIENT_SECRET)


@lru_cache()
def get_settings() -> Settings:
    """Get application settings with caching."""
    return Settings()


__all__ = ["Settings", "get_settings"]
