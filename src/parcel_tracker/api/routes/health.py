"""Health check endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, PlainTextResponse

from parcel_tracker import __version__
from parcel_tracker.api.dependencies import TrackerServiceDep
from parcel_tracker.api.schemas import ReadinessResponse


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_class=PlainTextResponse,
    summary="Liveness check",
    description="Returns OK while the process is serving, regardless of browser state.",
)
async def health_check() -> PlainTextResponse:
    """Liveness probe - is the process alive?"""
    return PlainTextResponse("OK", status_code=status.HTTP_200_OK)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Check if the browser session can accept scrape traffic.",
    responses={503: {"model": ReadinessResponse, "description": "Not ready"}},
)
async def readiness_check(service: TrackerServiceDep) -> ReadinessResponse | JSONResponse:
    """
    Readiness probe - is the service ready to handle scrapes?

    Returns 200 if the shared browser is running, 503 if not.
    """
    result = ReadinessResponse(**await service.readiness_check())
    if not result.ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=result.model_dump(),
        )
    return result


@router.get(
    "/",
    summary="API root",
    description="API information and available endpoints.",
)
async def root() -> dict[str, Any]:
    """Return API info with links."""
    return {
        "name": "Parcel Tracker API",
        "version": __version__,
        "links": {
            "self": "/",
            "track": "/track",
            "health": "/health",
            "ready": "/health/ready",
            "docs": "/docs",
        },
    }
