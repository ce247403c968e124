"""Resource filter for aborting heavy sub-resources via CDP.

Only the text of the tracking page is needed, so images, stylesheets, fonts
and media are failed in the browser before they reach the network. Everything
else (documents, scripts, XHR/fetch) is left untouched.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import nodriver.cdp.fetch as fetch
import nodriver.cdp.network as net

from parcel_tracker.utils.constants import BLOCKED_RESOURCE_TYPES
from parcel_tracker.utils.logging import get_logger


if TYPE_CHECKING:
    from nodriver import Tab

logger = get_logger(__name__)


@dataclass
class ResourceFilter:
    """
    Aborts requests of blocked resource types using the CDP Fetch domain.

    Usage:
        resource_filter = ResourceFilter(tab)
        await resource_filter.start()

        # Navigate; images/css/fonts/media never load
        await tab.get(url)

        await resource_filter.stop()
    """

    tab: Tab
    blocked_types: tuple[str, ...] = BLOCKED_RESOURCE_TYPES
    blocked_count: int = 0
    _enabled: bool = False
    _blocked: frozenset[net.ResourceType] = field(default_factory=frozenset)

    async def start(self) -> None:
        """Start intercepting requests of the blocked types."""
        if self._enabled:
            return

        self._blocked = frozenset(net.ResourceType(t) for t in self.blocked_types)

        # Only blocked types are paused; other requests never hit the handler
        patterns = [
            fetch.RequestPattern(url_pattern="*", resource_type=resource_type)
            for resource_type in self._blocked
        ]
        self.tab.add_handler(fetch.RequestPaused, self._on_request_paused)
        await self.tab.send(fetch.enable(patterns=patterns))

        self._enabled = True
        logger.debug("Resource filter started", blocked=list(self.blocked_types))

    async def stop(self) -> None:
        """Stop intercepting and cleanup."""
        if not self._enabled:
            return

        with contextlib.suppress(Exception):
            await self.tab.send(fetch.disable())

        self._enabled = False
        logger.debug("Resource filter stopped", blocked_count=self.blocked_count)

    async def _on_request_paused(self, event: fetch.RequestPaused) -> None:
        """Fail blocked requests, let anything else continue unmodified."""
        if event.resource_type in self._blocked:
            self.blocked_count += 1
            await self.tab.send(
                fetch.fail_request(
                    request_id=event.request_id,
                    error_reason=net.ErrorReason.BLOCKED_BY_CLIENT,
                )
            )
            return

        await self.tab.send(fetch.continue_request(request_id=event.request_id))
