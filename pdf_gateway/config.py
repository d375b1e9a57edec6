"""
PDF Gateway Configuration Module

Centralized configuration management with Pydantic validation.
Environment variables are validated at startup to catch misconfigurations early.
"""

import logging
import sys
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# The listening port is part of the service contract and is not configurable.
HOST = "0.0.0.0"
PORT = 8080

# Request bodies larger than this are rejected with 413 (50 MB).
MAX_BODY_BYTES = 50 * 1024 * 1024

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging to standard output with the service format."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout
    )


class GatewaySettings(BaseSettings):
    """
    PDF gateway configuration with validation.

    All settings can be overridden via environment variables.
    """

    # === Diagnostics ===
    show_html_report: str = Field(
        default="false",
        description="Log the raw HTML of every request when set to the literal 'true'"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # === Rendering ===
    render_timeout_seconds: int = Field(
        default=60,
        ge=1,
        le=600,
        description="Upper bound for one render (launch, load and export) in seconds"
    )
    playwright_headless: bool = Field(
        default=True,
        description="Run Chromium headless"
    )
    validate_playwright_on_startup: bool = Field(
        default=True,
        description="Render a probe page at startup to report readiness on /health"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one the logging module knows."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(allowed))}")
        return v_upper

    @property
    def html_report_enabled(self) -> bool:
        """Only the exact string 'true' turns request HTML logging on."""
        return self.show_html_report == "true"

    @property
    def render_timeout_ms(self) -> int:
        """Render timeout in milliseconds, as Playwright expects it."""
        return self.render_timeout_seconds * 1000

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning messages.
        """
        issues = []

        if self.is_production and self.html_report_enabled:
            issues.append(
                "WARNING: SHOW_HTML_REPORT is enabled in production; "
                "request HTML will be written to the logs"
            )

        return issues

    class Config:
        env_prefix = ""  # No prefix, use exact env var names
        case_sensitive = False  # SHOW_HTML_REPORT = show_html_report


@lru_cache()
def get_settings() -> GatewaySettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached. Tests call
    ``get_settings.cache_clear()`` after changing the environment.
    """
    return GatewaySettings()


def validate_config_on_startup() -> GatewaySettings:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e

    for issue in settings.validate_production_config():
        logger.warning(issue)

    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  render_timeout={settings.render_timeout_seconds}s")
    logger.info(f"  playwright_headless={settings.playwright_headless}")
    logger.info(f"  show_html_report={settings.html_report_enabled}")

    return settings
