"""Data models for output format."""

from parcel_tracker.models.output import TrackingEvent, TrackingResult


__all__ = [
    "TrackingEvent",
    "TrackingResult",
]
