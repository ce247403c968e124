"""Custom exceptions for the Parcel Tracker application."""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all tracker errors."""

    pass


class ValidationError(TrackerError):
    """Raised when a tracking number is missing or malformed."""

    pass


# =============================================================================
# Browser Errors
# =============================================================================


class BrowserError(TrackerError):
    """Base exception for browser-related errors."""

    pass


class BrowserNotInitializedError(BrowserError):
    """Raised when browser is accessed before start or after shutdown."""

    pass


class BrowserLaunchError(BrowserError):
    """Raised when the browser process cannot be started."""

    pass


class NavigationTimeoutError(BrowserError):
    """Raised when a page does not reach a ready state in time."""

    pass


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(TrackerError):
    """Raised when the rendered page has an unexpected shape."""

    pass


# =============================================================================
# Service Errors
# =============================================================================


class ServiceError(TrackerError):
    """Base exception for service-layer errors."""

    pass


class TrackerBusyError(ServiceError):
    """Raised when no page slot frees up within the queue timeout."""

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TrackerError):
    """Raised when configuration is invalid."""

    pass
