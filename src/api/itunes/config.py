"""
iTunes Config Service - Centralized endpoint and logging settings.
Values come from environment variables and are read lazily on first access.
"""

import logging
import os

from utils.get_logger import get_logger

logger = get_logger(__name__)

DEFAULT_API_URL = "https://itunes.apple.com/"
DEFAULT_TRENDING_HOST = "rss.applemarketingtools.com"
DEFAULT_TIMEOUT_SECONDS = 30.0

_FALSE_VALUES = {"0", "false", "no", "off"}


class ITunesConfig:
    """
    Centralized iTunes client configuration.
    Call ``reset()`` after changing the environment to re-read values.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self._api_url: str | None = None
        self._trending_host: str | None = None
        self._timeout_seconds: float | None = None
        self._logging_enabled: bool | None = None
        self._log_level: int | None = None

    @property
    def api_url(self) -> str:
        """Base URL for the search and lookup endpoints."""
        if self._api_url is None:
            self._api_url = os.getenv("ITUNES_API_URL") or DEFAULT_API_URL
        return self._api_url

    @property
    def trending_host(self) -> str:
        """Host of the charts service."""
        if self._trending_host is None:
            self._trending_host = os.getenv("ITUNES_TRENDING_HOST") or DEFAULT_TRENDING_HOST
        return self._trending_host

    @property
    def timeout_seconds(self) -> float:
        if self._timeout_seconds is None:
            raw = os.getenv("ITUNES_TIMEOUT_SECONDS")
            timeout = DEFAULT_TIMEOUT_SECONDS
            if raw:
                try:
                    timeout = float(raw)
                    if timeout <= 0:
                        raise ValueError("timeout must be positive")
                except ValueError as e:
                    logger.warning(f"Invalid ITUNES_TIMEOUT_SECONDS={raw!r} ({e}), using default")
                    timeout = DEFAULT_TIMEOUT_SECONDS
            self._timeout_seconds = timeout
        return self._timeout_seconds

    @property
    def logging_enabled(self) -> bool:
        """Whether service diagnostics are emitted at all."""
        if self._logging_enabled is None:
            raw = os.getenv("ITUNES_LOGGING", "1")
            self._logging_enabled = raw.strip().lower() not in _FALSE_VALUES
        return self._logging_enabled

    @property
    def log_level(self) -> int:
        if self._log_level is None:
            name = os.getenv("ITUNES_LOG_LEVEL", "INFO").strip().upper()
            level = logging.getLevelName(name)
            self._log_level = level if isinstance(level, int) else logging.INFO
        return self._log_level

    def get_config_status(self) -> dict:
        """
        Get the effective configuration.
        Useful for debugging and testing.
        """
        return {
            "api_url": self.api_url,
            "trending_host": self.trending_host,
            "timeout_seconds": self.timeout_seconds,
            "logging_enabled": self.logging_enabled,
            "log_level": logging.getLevelName(self.log_level),
        }


# Singleton instance for use across the application
itunes_config = ITunesConfig()
