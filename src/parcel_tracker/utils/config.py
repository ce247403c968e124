"""Configuration management using Pydantic."""

from __future__ import annotations

import warnings

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parcel_tracker.utils.constants import (
    NAVIGATION_TIMEOUT,
    QUEUE_TIMEOUT,
    SELECTOR_TIMEOUT,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
)


class BrowserSettings(BaseSettings):
    """Browser configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    headless: bool = Field(default=True, description="Run Chrome headless")
    executable_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("BROWSER_EXECUTABLE_PATH", "CHROME_PATH"),
        description="Chrome binary (auto-detected when unset)",
    )
    viewport_width: int = VIEWPORT_WIDTH
    viewport_height: int = VIEWPORT_HEIGHT


class ScraperSettings(BaseSettings):
    """Scrape timing and concurrency configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SCRAPER_",
        env_file=".env",
        extra="ignore",
    )

    navigation_timeout: float = Field(
        default=NAVIGATION_TIMEOUT,
        gt=0,
        description="Seconds to wait for DOMContentLoaded",
    )
    selector_timeout: float = Field(
        default=SELECTOR_TIMEOUT,
        gt=0,
        description="Seconds to wait for each readiness marker",
    )
    max_concurrent_pages: int = Field(
        default=4,
        ge=1,
        description="Maximum pages open at once in the shared browser",
    )
    queue_timeout: float = Field(
        default=QUEUE_TIMEOUT,
        ge=0,
        description="Seconds a request may wait for a free page slot",
    )


class CORSSettings(BaseSettings):
    """CORS configuration for API."""

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        env_file=".env",
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable/disable CORS")
    allow_origins: str = Field(
        default="*",
        description="Comma-separated allowed origins (use * for all)",
    )
    allow_methods: str = Field(
        default="GET,POST,OPTIONS",
        description="Comma-separated allowed HTTP methods",
    )
    allow_headers: str = Field(
        default="*",
        description="Comma-separated allowed headers (use * for all)",
    )

    def get_origins_list(self) -> list[str]:
        """Convert comma-separated origins to list."""
        if self.allow_origins == "*":
            return ["*"]
        return [o.strip() for o in self.allow_origins.split(",") if o.strip()]

    def get_methods_list(self) -> list[str]:
        """Convert comma-separated methods to list."""
        if self.allow_methods == "*":
            return ["*"]
        return [m.strip() for m in self.allow_methods.split(",") if m.strip()]

    def get_headers_list(self) -> list[str]:
        """Convert comma-separated headers to list."""
        if self.allow_headers == "*":
            return ["*"]
        return [h.strip() for h in self.allow_headers.split(",") if h.strip()]

    def is_permissive(self) -> bool:
        """Check if CORS allows all origins."""
        return self.allow_origins == "*"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    env: str = "development"
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("PORT", "TRACKER_PORT"),
        description="Listen port",
    )
    max_body_bytes: int = Field(
        default=1024 * 1024,
        gt=0,
        description="Largest accepted request body",
    )
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    log_level: str = "INFO"
    log_json: bool = False

    @model_validator(mode="after")
    def validate_production_security(self) -> Settings:
        """Warn about settings that are unsafe in production."""
        if self.env == "production":
            for warning_msg in self.get_security_warnings():
                warnings.warn(warning_msg, UserWarning, stacklevel=2)
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    def get_security_warnings(self) -> list[str]:
        """Get list of security warnings for current configuration."""
        warnings_list: list[str] = []

        if self.is_production:
            if self.cors.enabled and self.cors.is_permissive():
                warnings_list.append("CORS allows all origins in production")
            if self.debug:
                warnings_list.append("Debug mode enabled in production")
            if not self.browser.headless:
                warnings_list.append("Browser runs with a visible window in production")

        return warnings_list


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton)."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = Settings()
    return _settings
