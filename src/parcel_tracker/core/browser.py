"""Browser manager owning the single shared nodriver Chrome instance."""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import TYPE_CHECKING

import nodriver
import nodriver.cdp.emulation as emulation
import nodriver.cdp.network as net
import nodriver.cdp.page as cdp_page

from parcel_tracker.exceptions import (
    BrowserLaunchError,
    BrowserNotInitializedError,
    ConfigurationError,
    NavigationTimeoutError,
)
from parcel_tracker.utils.constants import (
    BROWSER_ARGS,
    NAVIGATION_TIMEOUT,
    SELECTOR_TIMEOUT,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
)
from parcel_tracker.utils.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Sequence

    from nodriver import Tab as Page
else:
    Page = nodriver.Tab

# Export Page for other modules
__all__ = ["BrowserManager", "Page", "resolve_executable_path"]

logger = get_logger(__name__)


def resolve_executable_path(executable_path: str | None) -> str | None:
    """
    Validate a configured Chrome binary.

    Args:
        executable_path: Configured path, or None to let nodriver search

    Returns:
        Absolute path to the binary, or None for auto-detection

    Raises:
        ConfigurationError: If a path is configured but no file exists there
    """
    if not executable_path:
        return None

    path = Path(executable_path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Browser executable not found: {executable_path}")
    return str(path.resolve())


class BrowserManager:
    """
    Manages the process-wide Chrome instance via nodriver.

    Lifecycle:
    - start() launches Chrome once; concurrent callers share the launch
    - get_browser() returns the running instance or fails fast
    - close() stops Chrome; safe to call more than once

    Pages are opened per request and must be released with close_page().
    """

    def __init__(
        self,
        headless: bool = True,
        executable_path: str | None = None,
        browser_args: list[str] | None = None,
    ) -> None:
        self.headless = headless
        self.executable_path = executable_path
        self.browser_args = list(browser_args or BROWSER_ARGS)

        self._browser: nodriver.Browser | None = None
        self._pages: list[Page] = []
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def is_ready(self) -> bool:
        """Whether a running browser is available for new pages."""
        return self._browser is not None and not self._closed

    @property
    def open_pages(self) -> int:
        """Number of pages currently open."""
        return len(self._pages)

    async def start(self) -> None:
        """Start Chrome via nodriver if it is not already running."""
        async with self._lock:
            if self._browser is not None:
                return

            executable = resolve_executable_path(self.executable_path)
            logger.info(
                "Starting Chrome browser",
                headless=self.headless,
                executable=executable or "auto",
            )

            try:
                self._browser = await nodriver.start(
                    headless=self.headless,
                    browser_executable_path=executable,
                    browser_args=self.browser_args,
                    sandbox=False,
                )
            except Exception as e:
                logger.error("Browser launch failed", error=str(e))
                raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

            self._closed = False
            logger.info("Browser started successfully")

    def get_browser(self) -> nodriver.Browser:
        """Return the running browser or raise if it was never started."""
        if self._browser is None or self._closed:
            raise BrowserNotInitializedError("Browser session is not initialized")
        return self._browser

    async def new_page(self) -> Page:
        """Create a new tab in the browser."""
        browser = self.get_browser()
        tab = await browser.get("about:blank", new_tab=True)
        self._pages.append(tab)
        logger.debug("New page created", total_pages=len(self._pages))
        return tab

    async def configure_page(
        self,
        page: Page,
        width: int = VIEWPORT_WIDTH,
        height: int = VIEWPORT_HEIGHT,
    ) -> None:
        """Disable the page cache and pin the viewport size."""
        await page.send(net.enable())
        await page.send(net.set_cache_disabled(cache_disabled=True))
        await page.send(
            emulation.set_device_metrics_override(
                width=width,
                height=height,
                device_scale_factor=1,
                mobile=False,
            )
        )

    async def goto(
        self,
        page: Page,
        url: str,
        timeout: float = NAVIGATION_TIMEOUT,
    ) -> None:
        """Navigate to URL, waiting only until the DOM has been parsed."""
        logger.info("Navigating to URL", url=url)

        dom_ready = asyncio.Event()

        async def on_dom_ready(_event: cdp_page.DomContentEventFired) -> None:
            dom_ready.set()

        page.add_handler(cdp_page.DomContentEventFired, on_dom_ready)

        async def navigate() -> None:
            await page.send(cdp_page.enable())
            await page.send(cdp_page.navigate(url))
            await dom_ready.wait()

        try:
            await asyncio.wait_for(navigate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error("Navigation timed out", url=url, timeout=timeout)
            raise NavigationTimeoutError(
                f"Navigation to {url} exceeded {timeout:g}s"
            ) from e

    async def wait_for_selectors(
        self,
        page: Page,
        selectors: Sequence[str],
        timeout: float = SELECTOR_TIMEOUT,
    ) -> None:
        """
        Wait concurrently until every selector matches an element.

        Args:
            page: Page to poll
            selectors: CSS selectors that must all appear
            timeout: Seconds allowed for each selector

        Raises:
            NavigationTimeoutError: If any selector does not appear in time
        """
        tasks = [
            asyncio.ensure_future(self._wait_for_selector(page, selector, timeout))
            for selector in selectors
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _wait_for_selector(self, page: Page, selector: str, timeout: float) -> None:
        try:
            await asyncio.wait_for(page.select(selector, timeout=timeout), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Selector not found", selector=selector, timeout=timeout)
            raise NavigationTimeoutError(
                f"Selector {selector!r} did not appear within {timeout:g}s"
            ) from e

    async def close_page(self, page: Page) -> None:
        """Close a specific tab."""
        if page in self._pages:
            self._pages.remove(page)
        with contextlib.suppress(Exception):
            await page.close()
        logger.debug("Page closed", remaining_pages=len(self._pages))

    async def close(self) -> None:
        """Close browser and cleanup."""
        async with self._lock:
            if self._closed or self._browser is None:
                self._closed = True
                return

            logger.info("Closing browser", open_pages=len(self._pages))
            self._closed = True

            for page in list(self._pages):
                with contextlib.suppress(Exception):
                    await page.close()
            self._pages.clear()

            with contextlib.suppress(Exception):
                self._browser.stop()
            self._browser = None

            logger.info("Browser closed")

    async def __aenter__(self) -> BrowserManager:
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
