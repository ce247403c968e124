"""Unit tests for TrackingExtractor."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from parcel_tracker.exceptions import (
    BrowserNotInitializedError,
    ExtractionError,
    NavigationTimeoutError,
)
from parcel_tracker.extractors.tracking import (
    FIELD_RULES,
    FieldRule,
    TrackingExtractor,
    build_extract_script,
    build_tracking_url,
)
from parcel_tracker.utils.constants import READY_SELECTORS


@pytest.fixture
def extractor(mock_browser_manager: MagicMock) -> TrackingExtractor:
    """Extractor bound to a mocked browser manager."""
    return TrackingExtractor(mock_browser_manager)


@pytest.fixture(autouse=True)
def no_resource_filter():
    """Skip CDP Fetch setup on the mocked page."""
    with patch("parcel_tracker.extractors.base.ResourceFilter") as mock_filter:
        mock_filter.return_value.start = AsyncMock()
        mock_filter.return_value.stop = AsyncMock()
        yield mock_filter


class TestBuildTrackingUrl:
    """Tests for URL construction."""

    def test_embeds_number_as_fragment(self) -> None:
        """Tracking number goes into the nums fragment parameter."""
        assert build_tracking_url("LB123") == "https://t.17track.net/es#nums=LB123"

    def test_trims_number(self) -> None:
        """Surrounding whitespace is removed."""
        assert build_tracking_url("  LB123\n") == "https://t.17track.net/es#nums=LB123"


class TestBuildExtractScript:
    """Tests for the in-page extraction script."""

    def test_script_embeds_all_selectors(self) -> None:
        """Every rule selector and the event selector appear in the script."""
        script = build_extract_script()

        for rule in FIELD_RULES:
            for selector in rule.selectors:
                assert json.dumps(selector)[1:-1] in script
        assert '".trn-block dd"' in script
        assert "JSON.stringify" in script


class TestParse:
    """Tests for raw data parsing."""

    def test_parse_full_data(self, extractor, sample_raw_data) -> None:
        """Primary selectors win and events keep document order."""
        result = extractor.parse(sample_raw_data)

        assert result.courier == "China Post"
        assert result.status == "In transit"
        assert [e.date for e in result.events] == [
            "2024-03-02 10:15",
            "2024-03-01 08:00",
            "Sin fecha",
        ]
        assert result.events[0].location == "Shanghai, CN"
        assert result.events[1].location == "Beijing, CN"
        assert result.events[0].description == "【Shanghai, CN】Departed from facility"

    def test_parse_missing_event_fields_use_placeholders(
        self, extractor, sample_raw_data
    ) -> None:
        """Absent date/description become placeholders."""
        event = extractor.parse(sample_raw_data).events[2]

        assert event.date == "Sin fecha"
        assert event.description == "Sin descripción"
        assert event.location == "Sin ubicación"

    def test_parse_status_secondary_selector(self, extractor) -> None:
        """Status falls back to the secondary selector."""
        result = extractor.parse(
            {"candidates": {"courier": [None, None], "status": [None, "Delivered"]}}
        )

        assert result.status == "Delivered"

    def test_parse_nothing_matched(self, extractor) -> None:
        """Courier and status fall back to fixed placeholders."""
        result = extractor.parse({"candidates": {}, "events": []})

        assert result.courier == "Desconocido"
        assert result.status == "Sin información"
        assert result.events == []

    def test_parse_empty_payload(self, extractor) -> None:
        """An empty payload still yields a complete result."""
        result = extractor.parse({})

        assert result.to_dict() == {
            "courier": "Desconocido",
            "status": "Sin información",
            "events": [],
        }

    def test_parse_skips_malformed_events(self, extractor) -> None:
        """Non-object event entries are ignored."""
        result = extractor.parse({"events": ["junk", {"date": "d", "description": "x"}]})

        assert len(result.events) == 1

    def test_custom_rules(self, mock_browser_manager) -> None:
        """Rules are data: a different chain changes the result."""
        rules = (
            FieldRule("courier", (".a",), "Nobody"),
            FieldRule("status", (".b",), "Nothing"),
        )
        extractor = TrackingExtractor(mock_browser_manager, rules=rules)

        result = extractor.parse({"candidates": {"courier": [None]}})

        assert result.courier == "Nobody"
        assert result.status == "Nothing"


class TestExtract:
    """Tests for in-page extraction."""

    @pytest.mark.asyncio
    async def test_extract_decodes_json_string(self, extractor, mock_page) -> None:
        """JSON string returned by the page is decoded."""
        mock_page.evaluate.return_value = json.dumps({"candidates": {}, "events": []})

        raw = await extractor.extract(mock_page)

        assert raw == {"candidates": {}, "events": []}

    @pytest.mark.asyncio
    async def test_extract_invalid_json(self, extractor, mock_page) -> None:
        """Garbage script output raises ExtractionError."""
        mock_page.evaluate.return_value = "not json"

        with pytest.raises(ExtractionError):
            await extractor.extract(mock_page)

    @pytest.mark.asyncio
    async def test_extract_non_object(self, extractor, mock_page) -> None:
        """Script output that is not an object raises ExtractionError."""
        mock_page.evaluate.return_value = "[1, 2]"

        with pytest.raises(ExtractionError):
            await extractor.extract(mock_page)


class TestScrape:
    """Tests for the full scrape flow."""

    @pytest.mark.asyncio
    async def test_scrape_success(
        self, extractor, mock_browser_manager, mock_page, sample_raw_data
    ) -> None:
        """Happy path navigates, waits, extracts and closes the page."""
        mock_page.evaluate.return_value = json.dumps(sample_raw_data)

        result = await extractor.scrape("  LB123  ")

        mock_browser_manager.configure_page.assert_awaited_once_with(mock_page, 1280, 720)
        mock_browser_manager.goto.assert_awaited_once_with(
            mock_page, "https://t.17track.net/es#nums=LB123", timeout=15.0
        )
        mock_browser_manager.wait_for_selectors.assert_awaited_once_with(
            mock_page, READY_SELECTORS, timeout=10.0
        )
        mock_browser_manager.close_page.assert_awaited_once_with(mock_page)
        assert result.courier == "China Post"
        assert len(result.events) == 3

    @pytest.mark.asyncio
    async def test_scrape_installs_resource_filter(
        self, extractor, mock_page, sample_raw_data, no_resource_filter
    ) -> None:
        """The resource filter is started and stopped around the scrape."""
        mock_page.evaluate.return_value = json.dumps(sample_raw_data)

        await extractor.scrape("LB123")

        no_resource_filter.assert_called_once_with(mock_page)
        no_resource_filter.return_value.start.assert_awaited_once()
        no_resource_filter.return_value.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_navigation_timeout_closes_page(
        self, extractor, mock_browser_manager, mock_page
    ) -> None:
        """Navigation timeout propagates and the page is still closed."""
        mock_browser_manager.goto.side_effect = NavigationTimeoutError("slow")

        with pytest.raises(NavigationTimeoutError):
            await extractor.scrape("LB123")

        mock_browser_manager.close_page.assert_awaited_once_with(mock_page)
        mock_page.evaluate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_marker_timeout_closes_page(
        self, extractor, mock_browser_manager, mock_page
    ) -> None:
        """Readiness wait timeout propagates and the page is still closed."""
        mock_browser_manager.wait_for_selectors.side_effect = NavigationTimeoutError(
            "no markers"
        )

        with pytest.raises(NavigationTimeoutError):
            await extractor.scrape("LB123")

        mock_browser_manager.close_page.assert_awaited_once_with(mock_page)

    @pytest.mark.asyncio
    async def test_unexpected_error_rethrown_unchanged(
        self, extractor, mock_browser_manager, mock_page
    ) -> None:
        """Arbitrary errors are re-raised as-is."""
        error = RuntimeError("target crashed")
        mock_page.evaluate.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            await extractor.scrape("LB123")

        assert exc_info.value is error
        mock_browser_manager.close_page.assert_awaited_once_with(mock_page)

    @pytest.mark.asyncio
    async def test_browser_not_started(self, extractor, mock_browser_manager) -> None:
        """Session errors surface before any page is opened."""
        mock_browser_manager.new_page.side_effect = BrowserNotInitializedError("down")

        with pytest.raises(BrowserNotInitializedError):
            await extractor.scrape("LB123")

        mock_browser_manager.close_page.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_timeouts(self, mock_browser_manager, mock_page) -> None:
        """Configured timeouts are passed through."""
        extractor = TrackingExtractor(
            mock_browser_manager, navigation_timeout=3.0, selector_timeout=2.0
        )
        mock_page.evaluate.return_value = "{}"

        await extractor.scrape("LB123")

        assert mock_browser_manager.goto.call_args.kwargs["timeout"] == 3.0
        assert mock_browser_manager.wait_for_selectors.call_args.kwargs["timeout"] == 2.0
