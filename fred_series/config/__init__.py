"""Configuration."""

from fred_series.config.settings import (
    API_KEY_ENV,
    API_KEY_URL,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    Settings,
)

__all__ = ["API_KEY_ENV", "API_KEY_URL", "DEFAULT_BASE_URL", "DEFAULT_TIMEOUT", "Settings"]
