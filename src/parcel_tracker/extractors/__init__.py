"""Data extractors for tracking pages."""

from parcel_tracker.extractors.tracking import FieldRule, TrackingExtractor


__all__ = [
    "FieldRule",
    "TrackingExtractor",
]
