"""Tracking endpoint - scrape a shipment by tracking number."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from parcel_tracker.api.dependencies import TrackerServiceDep
from parcel_tracker.api.schemas import (
    ErrorResponse,
    TrackingResultSchema,
    TrackRequest,
)
from parcel_tracker.exceptions import TrackerBusyError
from parcel_tracker.utils.logging import get_logger


router = APIRouter(tags=["Tracking"])
logger = get_logger(__name__)

INTERNAL_ERROR = "Internal server error"
BUSY_ERROR = "Tracking service is busy"
VALIDATION_ERROR = "Valid tracking number is required"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build a JSON error body of the form {"error": message}."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/track",
    response_model=TrackingResultSchema,
    summary="Track a shipment",
    description="Scrape courier, status and events for a tracking number.",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid tracking number"},
        500: {"model": ErrorResponse, "description": "Scraping failed"},
        503: {"model": ErrorResponse, "description": "All page slots busy"},
    },
)
async def track(
    request: TrackRequest,
    service: TrackerServiceDep,
) -> TrackingResultSchema | JSONResponse:
    """
    Scrape tracking data for a shipment.

    - **trackingNumber**: Carrier-agnostic tracking number (required)

    Failures are logged server-side; the response never carries the cause.
    """
    try:
        result = await service.track(request.trackingNumber)
    except TrackerBusyError:
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, BUSY_ERROR)
    except Exception as e:
        logger.error(
            "Error in /track",
            tracking_number=request.trackingNumber,
            error_type=type(e).__name__,
            error=str(e),
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    logger.info(
        "Sending tracking data",
        tracking_number=request.trackingNumber,
        events=len(result.events),
    )
    return TrackingResultSchema.model_validate(result.to_dict())
