"""Core module - Browser session management."""

from parcel_tracker.core.browser import BrowserManager, resolve_executable_path


__all__ = [
    "BrowserManager",
    "resolve_executable_path",
]
