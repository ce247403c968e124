"""Service layer shared by the API and CLI."""

from parcel_tracker.services.tracker_service import TrackerService


__all__ = ["TrackerService"]
