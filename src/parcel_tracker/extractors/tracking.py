"""Tracking page extractor for 17track."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from parcel_tracker.exceptions import ExtractionError
from parcel_tracker.extractors.base import BaseExtractor
from parcel_tracker.models.output import TrackingEvent, TrackingResult
from parcel_tracker.utils.constants import (
    COURIER_SELECTORS,
    EVENT_DATE_SELECTOR,
    EVENT_DESCRIPTION_SELECTOR,
    EVENT_SELECTOR,
    NAVIGATION_TIMEOUT,
    READY_SELECTORS,
    SELECTOR_TIMEOUT,
    STATUS_SELECTORS,
    TRACKING_URL,
    UNKNOWN_COURIER,
    UNKNOWN_DATE,
    UNKNOWN_DESCRIPTION,
    UNKNOWN_STATUS,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
)
from parcel_tracker.utils.logging import get_logger
from parcel_tracker.utils.parsers import first_text, parse_location


if TYPE_CHECKING:
    from parcel_tracker.core.browser import BrowserManager, Page

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """Selectors tried in priority order for one field, with a terminal default."""

    name: str
    selectors: tuple[str, ...]
    default: str


FIELD_RULES = (
    FieldRule("courier", COURIER_SELECTORS, UNKNOWN_COURIER),
    FieldRule("status", STATUS_SELECTORS, UNKNOWN_STATUS),
)

EXTRACT_SCRIPT = """
(() => {
    const rules = %(rules)s;
    const text = (root, selector) => {
        const el = root.querySelector(selector);
        return el ? el.textContent.trim() : null;
    };

    const candidates = {};
    for (const [name, selectors] of Object.entries(rules)) {
        candidates[name] = selectors.map(selector => text(document, selector));
    }

    const events = Array.from(document.querySelectorAll(%(event)s), el => ({
        date: text(el, %(date)s),
        description: text(el, %(description)s),
    }));

    return JSON.stringify({candidates, events});
})()
"""


def build_tracking_url(tracking_number: str) -> str:
    """Build the 17track URL for a tracking number."""
    return TRACKING_URL.format(tracking_number=tracking_number.strip())


def build_extract_script(
    rules: tuple[FieldRule, ...] = FIELD_RULES,
    event_selector: str = EVENT_SELECTOR,
) -> str:
    """Render the in-page script that collects raw candidate texts."""
    return EXTRACT_SCRIPT % {
        "rules": json.dumps({rule.name: list(rule.selectors) for rule in rules}),
        "event": json.dumps(event_selector),
        "date": json.dumps(EVENT_DATE_SELECTOR),
        "description": json.dumps(EVENT_DESCRIPTION_SELECTOR),
    }


class TrackingExtractor(BaseExtractor):
    """Scrapes one shipment's courier, status and event history."""

    def __init__(
        self,
        browser: BrowserManager,
        navigation_timeout: float = NAVIGATION_TIMEOUT,
        selector_timeout: float = SELECTOR_TIMEOUT,
        viewport: tuple[int, int] = (VIEWPORT_WIDTH, VIEWPORT_HEIGHT),
        rules: tuple[FieldRule, ...] = FIELD_RULES,
    ) -> None:
        self.browser = browser
        self.navigation_timeout = navigation_timeout
        self.selector_timeout = selector_timeout
        self.viewport = viewport
        self.rules = rules
        self._script = build_extract_script(rules)

    async def scrape(self, tracking_number: str) -> TrackingResult:
        """
        Scrape tracking data for a single tracking number.

        Single attempt, no retry. The page opened for the scrape is closed
        whether the scrape succeeds or fails.

        Args:
            tracking_number: Carrier-agnostic tracking number

        Returns:
            TrackingResult with events in page order

        Raises:
            BrowserNotInitializedError: If the shared browser is not running
            NavigationTimeoutError: If navigation or a readiness marker times out
        """
        tracking_number = tracking_number.strip()
        url = build_tracking_url(tracking_number)
        logger.info("Tracking shipment", tracking_number=tracking_number)

        try:
            async with self.open_page() as page, self.resource_filtering(page):
                await self.browser.configure_page(page, *self.viewport)
                await self.browser.goto(page, url, timeout=self.navigation_timeout)

                logger.debug("Waiting for tracking content", selectors=READY_SELECTORS)
                await self.browser.wait_for_selectors(
                    page, READY_SELECTORS, timeout=self.selector_timeout
                )

                raw_data = await self.extract(page)
        except Exception as e:
            logger.error(
                "Scrape failed",
                tracking_number=tracking_number,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        result = self.parse(raw_data)
        logger.info(
            "Tracking data extracted",
            tracking_number=tracking_number,
            courier=result.courier,
            events=len(result.events),
        )
        return result

    async def extract(self, page: Page) -> dict[str, Any]:
        """Extract raw candidate texts from the rendered DOM."""
        raw = await page.evaluate(self._script)

        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ExtractionError(f"Extraction script returned invalid JSON: {e}") from e

        if not isinstance(raw, dict):
            raise ExtractionError(
                f"Extraction script returned {type(raw).__name__}, expected object"
            )
        return raw

    def parse(self, raw_data: dict[str, Any]) -> TrackingResult:
        """Apply selector fallbacks and placeholders to raw page data."""
        candidates = raw_data.get("candidates") or {}

        fields = {
            rule.name: first_text(candidates.get(rule.name) or [], rule.default)
            for rule in self.rules
        }

        events = []
        for raw_event in raw_data.get("events") or []:
            if not isinstance(raw_event, dict):
                continue
            description = first_text([raw_event.get("description")], UNKNOWN_DESCRIPTION)
            events.append(
                TrackingEvent(
                    date=first_text([raw_event.get("date")], UNKNOWN_DATE),
                    location=parse_location(description),
                    description=description,
                )
            )

        return TrackingResult(
            courier=fields.get("courier", UNKNOWN_COURIER),
            status=fields.get("status", UNKNOWN_STATUS),
            events=events,
        )
