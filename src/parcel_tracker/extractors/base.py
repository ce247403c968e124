"""Base extractor class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from parcel_tracker.utils.logging import get_logger
from parcel_tracker.utils.resource_filter import ResourceFilter


if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from parcel_tracker.core.browser import BrowserManager, Page

logger = get_logger(__name__)


class BaseExtractor(ABC):
    """Abstract base class for data extractors."""

    # Subclasses should set this in __init__
    browser: BrowserManager | None = None

    @abstractmethod
    async def extract(self, page: Page) -> dict[str, Any]:
        """Extract raw data from page."""
        ...

    @abstractmethod
    def parse(self, raw_data: dict[str, Any]) -> Any:
        """Parse and clean extracted data."""
        ...

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[Page]:
        """
        Context manager for a short-lived page.

        The page is always closed on exit, whether or not the body raised,
        so a failed scrape never leaks a tab in the shared browser.

        Yields:
            Freshly opened page
        """
        if self.browser is None:
            raise RuntimeError("Browser not set on extractor")

        page = await self.browser.new_page()
        try:
            yield page
        finally:
            await self.browser.close_page(page)

    @asynccontextmanager
    async def resource_filtering(self, page: Page) -> AsyncIterator[ResourceFilter]:
        """
        Context manager for sub-resource blocking.

        Usage:
            async with self.resource_filtering(page) as resource_filter:
                await self.browser.goto(page, url)

        Args:
            page: Browser page to filter

        Yields:
            ResourceFilter instance
        """
        resource_filter = ResourceFilter(page)
        try:
            await resource_filter.start()
            yield resource_filter
        finally:
            await resource_filter.stop()
