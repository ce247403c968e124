"""
Parcel Tracker - Shipment tracking scraper driven by a headless Chrome browser.

Usage:
    from parcel_tracker import BrowserManager, TrackingExtractor

    async with BrowserManager() as browser:
        result = await TrackingExtractor(browser).scrape("LB123456789CN")
"""

__version__ = "0.1.0"

from parcel_tracker.core.browser import BrowserManager
from parcel_tracker.extractors.tracking import TrackingExtractor
from parcel_tracker.services.tracker_service import TrackerService


__all__ = [
    "BrowserManager",
    "TrackerService",
    "TrackingExtractor",
    "__version__",
]
