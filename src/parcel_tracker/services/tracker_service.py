"""Tracker service - shared business logic for the API and CLI."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from parcel_tracker.core.browser import BrowserManager
from parcel_tracker.exceptions import TrackerBusyError, ValidationError
from parcel_tracker.extractors.tracking import TrackingExtractor
from parcel_tracker.utils.config import get_settings
from parcel_tracker.utils.constants import QUEUE_TIMEOUT
from parcel_tracker.utils.logging import get_logger


if TYPE_CHECKING:
    from parcel_tracker.models.output import TrackingResult
    from parcel_tracker.utils.config import Settings

logger = get_logger(__name__)


class TrackerService:
    """
    Service layer that owns the browser session and the tracking extractor.

    One instance is created per process and handed to request handlers.
    Concurrent scrapes are bounded by a semaphore: requests wait up to
    queue_timeout seconds for a free page slot, then fail with
    TrackerBusyError instead of piling more pages onto the browser.
    """

    def __init__(
        self,
        browser: BrowserManager,
        extractor: TrackingExtractor | None = None,
        max_concurrent_pages: int = 4,
        queue_timeout: float = QUEUE_TIMEOUT,
    ) -> None:
        """Initialize tracker service."""
        self.browser = browser
        self.extractor = extractor or TrackingExtractor(browser)
        self.max_concurrent_pages = max_concurrent_pages
        self.queue_timeout = queue_timeout

        self._slots = asyncio.Semaphore(max_concurrent_pages)
        self._in_flight = 0
        self._started_at = time.monotonic()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TrackerService:
        """Build a service wired from application settings."""
        settings = settings or get_settings()

        browser = BrowserManager(
            headless=settings.browser.headless,
            executable_path=settings.browser.executable_path,
        )
        extractor = TrackingExtractor(
            browser,
            navigation_timeout=settings.scraper.navigation_timeout,
            selector_timeout=settings.scraper.selector_timeout,
            viewport=(settings.browser.viewport_width, settings.browser.viewport_height),
        )
        return cls(
            browser=browser,
            extractor=extractor,
            max_concurrent_pages=settings.scraper.max_concurrent_pages,
            queue_timeout=settings.scraper.queue_timeout,
        )

    @property
    def is_ready(self) -> bool:
        """Whether the browser session can serve scrapes."""
        return self.browser.is_ready

    @property
    def in_flight(self) -> int:
        """Number of scrapes currently holding a page slot."""
        return self._in_flight

    async def start(self) -> None:
        """Launch the shared browser before traffic is accepted."""
        await self.browser.start()

    async def close(self) -> None:
        """Shut down the shared browser."""
        await self.browser.close()

    async def track(self, tracking_number: str) -> TrackingResult:
        """
        Scrape a tracking number, waiting for a free page slot first.

        Args:
            tracking_number: Tracking number (surrounding whitespace ignored)

        Returns:
            TrackingResult from the extractor

        Raises:
            ValidationError: If the tracking number is blank
            TrackerBusyError: If no slot frees within queue_timeout
        """
        tracking_number = tracking_number.strip()
        if not tracking_number:
            raise ValidationError("Valid tracking number is required")

        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self.queue_timeout)
        except asyncio.TimeoutError as e:
            logger.warning(
                "No page slot available",
                tracking_number=tracking_number,
                max_concurrent_pages=self.max_concurrent_pages,
                queue_timeout=self.queue_timeout,
            )
            raise TrackerBusyError("Tracking service is busy") from e

        self._in_flight += 1
        try:
            return await self.extractor.scrape(tracking_number)
        finally:
            self._in_flight -= 1
            self._slots.release()

    async def readiness_check(self) -> dict[str, Any]:
        """Report whether the service can accept scrape traffic."""
        return {
            "ready": self.is_ready,
            "status": "ready" if self.is_ready else "not_ready",
            "browser_available": self.is_ready,
            "open_pages": self.browser.open_pages,
            "in_flight": self._in_flight,
            "max_concurrent_pages": self.max_concurrent_pages,
            "uptime_seconds": round(time.monotonic() - self._started_at, 3),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
