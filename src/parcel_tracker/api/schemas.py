"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


# =============================================================================
# Base Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str


# =============================================================================
# Tracking Schemas (aligned with TrackingResult dataclass)
# =============================================================================


class TrackRequest(BaseModel):
    """Request for scraping a tracking number."""

    model_config = ConfigDict(extra="ignore")

    trackingNumber: StrictStr

    @field_validator("trackingNumber")
    @classmethod
    def strip_tracking_number(cls, value: str) -> str:
        """Trim whitespace and reject blank numbers."""
        value = value.strip()
        if not value:
            raise ValueError("tracking number must not be blank")
        return value


class TrackingEventSchema(BaseModel):
    """Single tracking checkpoint."""

    date: str
    location: str
    description: str


class TrackingResultSchema(BaseModel):
    """Tracking result returned by POST /track."""

    courier: str
    status: str
    events: list[TrackingEventSchema] = Field(default_factory=list)


# =============================================================================
# Health Schemas
# =============================================================================


class ReadinessResponse(BaseModel):
    """Readiness probe response."""

    status: str
    ready: bool
    browser_available: bool
    open_pages: int
    in_flight: int
    max_concurrent_pages: int
    uptime_seconds: float
    timestamp: str
