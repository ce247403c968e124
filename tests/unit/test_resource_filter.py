"""Unit tests for ResourceFilter."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import nodriver.cdp.fetch as fetch
import nodriver.cdp.network as net
import pytest

from parcel_tracker.utils.resource_filter import ResourceFilter


def make_event(resource_type: net.ResourceType) -> MagicMock:
    """Build a paused-request event double."""
    event = MagicMock()
    event.request_id = fetch.RequestId("req-1")
    event.resource_type = resource_type
    return event


class TestResourceFilterLifecycle:
    """Tests for start/stop."""

    @pytest.mark.asyncio
    async def test_start_enables_fetch_and_registers_handler(self, mock_page) -> None:
        """start registers the paused handler and enables Fetch once."""
        resource_filter = ResourceFilter(mock_page)

        await resource_filter.start()
        await resource_filter.start()

        mock_page.add_handler.assert_called_once_with(
            fetch.RequestPaused, resource_filter._on_request_paused
        )
        assert mock_page.send.await_count == 1
        assert resource_filter._enabled is True

    @pytest.mark.asyncio
    async def test_start_builds_one_pattern_per_blocked_type(self, mock_page) -> None:
        """Only blocked resource types are paused."""
        resource_filter = ResourceFilter(mock_page)

        with patch("parcel_tracker.utils.resource_filter.fetch.enable") as mock_enable:
            await resource_filter.start()

        patterns = mock_enable.call_args.kwargs["patterns"]
        assert {p.resource_type for p in patterns} == {
            net.ResourceType.IMAGE,
            net.ResourceType.STYLESHEET,
            net.ResourceType.FONT,
            net.ResourceType.MEDIA,
        }

    @pytest.mark.asyncio
    async def test_stop_when_not_started(self, mock_page) -> None:
        """stop without start sends nothing."""
        resource_filter = ResourceFilter(mock_page)

        await resource_filter.stop()

        mock_page.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stop_suppresses_errors(self, mock_page) -> None:
        """Errors disabling Fetch on a closing page are ignored."""
        resource_filter = ResourceFilter(mock_page)
        await resource_filter.start()
        mock_page.send.side_effect = ConnectionError("tab gone")

        await resource_filter.stop()

        assert resource_filter._enabled is False


class TestRequestPaused:
    """Tests for the paused-request handler."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "resource_type",
        [
            net.ResourceType.IMAGE,
            net.ResourceType.STYLESHEET,
            net.ResourceType.FONT,
            net.ResourceType.MEDIA,
        ],
    )
    async def test_blocked_types_are_failed(self, mock_page, resource_type) -> None:
        """Images, stylesheets, fonts and media are aborted."""
        resource_filter = ResourceFilter(mock_page)
        await resource_filter.start()

        with (
            patch("parcel_tracker.utils.resource_filter.fetch.fail_request") as mock_fail,
            patch(
                "parcel_tracker.utils.resource_filter.fetch.continue_request"
            ) as mock_continue,
        ):
            await resource_filter._on_request_paused(make_event(resource_type))

        mock_fail.assert_called_once()
        assert (
            mock_fail.call_args.kwargs["error_reason"]
            == net.ErrorReason.BLOCKED_BY_CLIENT
        )
        mock_continue.assert_not_called()
        assert resource_filter.blocked_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "resource_type",
        [
            net.ResourceType.DOCUMENT,
            net.ResourceType.SCRIPT,
            net.ResourceType.XHR,
            net.ResourceType.FETCH,
        ],
    )
    async def test_other_types_continue(self, mock_page, resource_type) -> None:
        """Documents, scripts and XHR/fetch proceed unmodified."""
        resource_filter = ResourceFilter(mock_page)
        await resource_filter.start()

        with (
            patch("parcel_tracker.utils.resource_filter.fetch.fail_request") as mock_fail,
            patch(
                "parcel_tracker.utils.resource_filter.fetch.continue_request"
            ) as mock_continue,
        ):
            await resource_filter._on_request_paused(make_event(resource_type))

        mock_continue.assert_called_once()
        mock_fail.assert_not_called()
        assert resource_filter.blocked_count == 0
