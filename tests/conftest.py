"""Pytest configuration and fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from parcel_tracker.models.output import TrackingEvent, TrackingResult


@pytest.fixture
def sample_raw_data() -> dict:
    """Raw data as returned by the in-page extraction script."""
    return {
        "candidates": {
            "courier": ["China Post", None],
            "status": ["In transit", "Departed from facility"],
        },
        "events": [
            {"date": "2024-03-02 10:15", "description": "【Shanghai, CN】Departed from facility"},
            {"date": "2024-03-01 08:00", "description": "Beijing, CN, Accepted by carrier"},
            {"date": None, "description": None},
        ],
    }


@pytest.fixture
def sample_result() -> TrackingResult:
    """Tracking result for API tests."""
    return TrackingResult(
        courier="China Post",
        status="In transit",
        events=[
            TrackingEvent(
                date="2024-03-02 10:15",
                location="Shanghai, CN",
                description="【Shanghai, CN】Departed from facility",
            ),
            TrackingEvent(
                date="2024-03-01 08:00",
                location="Beijing, CN",
                description="Beijing, CN, Accepted by carrier",
            ),
        ],
    )


@pytest.fixture
def mock_page() -> MagicMock:
    """A nodriver tab double with async CDP methods."""
    page = MagicMock()
    page.send = AsyncMock()
    page.select = AsyncMock(return_value=MagicMock())
    page.evaluate = AsyncMock()
    page.close = AsyncMock()
    page.add_handler = MagicMock()
    return page


@pytest.fixture
def mock_browser_manager(mock_page: MagicMock) -> MagicMock:
    """A BrowserManager double that hands out mock_page."""
    manager = MagicMock()
    manager.is_ready = True
    manager.open_pages = 0
    manager.new_page = AsyncMock(return_value=mock_page)
    manager.close_page = AsyncMock()
    manager.configure_page = AsyncMock()
    manager.goto = AsyncMock()
    manager.wait_for_selectors = AsyncMock()
    manager.start = AsyncMock()
    manager.close = AsyncMock()
    return manager
