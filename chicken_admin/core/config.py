"""
Configuration management for the Chicken Road admin console.

This module handles loading and validating environment variables.
"""

import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


class Config:
    """Configuration class with environment variables."""

    # Admin API
    ADMIN_API_BASE_URL: str = os.getenv("ADMIN_API_BASE_URL", "http://localhost:3000")
    ADMIN_API_PREFIX: str = os.getenv("ADMIN_API_PREFIX", "/admin/api/v1")
    ADMIN_API_TIMEOUT_SECONDS: float = _float_env("ADMIN_API_TIMEOUT_SECONDS", 30.0)

    # Filters / pagination
    CONSOLE_TIMEZONE: str = os.getenv("CONSOLE_TIMEZONE", "Asia/Kolkata")
    DEFAULT_PAGE_LIMIT: int = _int_env("DEFAULT_PAGE_LIMIT", 20)
    MAX_PAGE_LIMIT: int = _int_env("MAX_PAGE_LIMIT", 100)

    # Display
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "INR")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def api_root(cls, base_url: Optional[str] = None, prefix: Optional[str] = None) -> str:
        """Return the base URL joined with the versioned admin prefix; arguments override the env values."""
        api_prefix = "/" + (prefix or cls.ADMIN_API_PREFIX).strip("/")
        return (base_url or cls.ADMIN_API_BASE_URL).rstrip("/") + api_prefix

    @classmethod
    def validate(cls) -> None:
        """
        Validate that required configuration is present.

        Raises:
            ValueError: If required configuration is missing or inconsistent.
        """
        if not cls.ADMIN_API_BASE_URL:
            raise ValueError("ADMIN_API_BASE_URL must be configured")
        if not cls.ADMIN_API_PREFIX:
            raise ValueError("ADMIN_API_PREFIX must be configured")
        if cls.DEFAULT_PAGE_LIMIT <= 0 or cls.MAX_PAGE_LIMIT <= 0:
            raise ValueError("Page limits must be positive integers")
        if cls.DEFAULT_PAGE_LIMIT > cls.MAX_PAGE_LIMIT:
            raise ValueError("DEFAULT_PAGE_LIMIT cannot exceed MAX_PAGE_LIMIT")
