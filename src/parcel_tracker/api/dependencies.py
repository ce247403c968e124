"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from parcel_tracker.exceptions import BrowserNotInitializedError
from parcel_tracker.services.tracker_service import TrackerService


def get_tracker_service(request: Request) -> TrackerService:
    """Return the tracker service owned by the running application."""
    service: TrackerService | None = getattr(request.app.state, "tracker_service", None)
    if service is None:
        raise BrowserNotInitializedError("Tracker service is not initialized")
    return service


# Type aliases for dependency injection
TrackerServiceDep = Annotated[TrackerService, Depends(get_tracker_service)]
