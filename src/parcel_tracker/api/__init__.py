"""RESTful API package for Parcel Tracker."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from fastapi import FastAPI

    from parcel_tracker.services.tracker_service import TrackerService


def create_app(service: TrackerService | None = None) -> FastAPI:
    """Lazy import of create_app to avoid circular imports."""
    from parcel_tracker.api.main import create_app as _create_app

    return _create_app(service)


__all__ = ["create_app"]
