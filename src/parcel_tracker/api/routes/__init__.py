"""API routes package."""

from parcel_tracker.api.routes.health import router as health_router
from parcel_tracker.api.routes.tracking import router as tracking_router


__all__ = [
    "health_router",
    "tracking_router",
]
