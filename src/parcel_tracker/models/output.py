"""Output data models for scraped tracking results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from parcel_tracker.utils.constants import (
    UNKNOWN_COURIER,
    UNKNOWN_DATE,
    UNKNOWN_DESCRIPTION,
    UNKNOWN_LOCATION,
    UNKNOWN_STATUS,
)


@dataclass
class TrackingEvent:
    """Single checkpoint in a shipment's history."""

    date: str = UNKNOWN_DATE
    location: str = UNKNOWN_LOCATION
    description: str = UNKNOWN_DESCRIPTION


@dataclass
class TrackingResult:
    """Shipment status with its events in page order."""

    courier: str = UNKNOWN_COURIER
    status: str = UNKNOWN_STATUS
    events: list[TrackingEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return _dataclass_to_dict(self)


def _dataclass_to_dict(obj: Any) -> Any:
    """Recursively convert dataclass instances to dictionaries."""
    if hasattr(obj, "__dataclass_fields__"):
        return {k: _dataclass_to_dict(v) for k, v in obj.__dict__.items()}
    if isinstance(obj, list):
        return [_dataclass_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _dataclass_to_dict(v) for k, v in obj.items()}
    return obj
