"""Utility modules."""

from parcel_tracker.utils.config import Settings, get_settings
from parcel_tracker.utils.constants import (
    NAVIGATION_TIMEOUT,
    SELECTOR_TIMEOUT,
    TRACKING_URL,
)
from parcel_tracker.utils.logging import get_logger, setup_logging
from parcel_tracker.utils.parsers import clean_text, first_text, parse_location
from parcel_tracker.utils.resource_filter import ResourceFilter


__all__ = [
    "NAVIGATION_TIMEOUT",
    "SELECTOR_TIMEOUT",
    "TRACKING_URL",
    "ResourceFilter",
    "Settings",
    "clean_text",
    "first_text",
    "get_logger",
    "get_settings",
    "parse_location",
    "setup_logging",
]
