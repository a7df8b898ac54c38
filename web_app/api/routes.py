"""API routes implementation."""

from typing import List

from fastapi import APIRouter, Request, Response, HTTPException, Query, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLInfoResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from yaus.exceptions import InvalidURLError, LocatorConflictError, StorageUnavailableError

router = APIRouter()


def raise_for_store_error(e: Exception) -> None:
    """Map core exceptions onto HTTP errors."""
    if isinstance(e, InvalidURLError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if isinstance(e, LocatorConflictError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if isinstance(e, StorageUnavailableError):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    raise e


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": ShortenResponse, "description": "URL was already shortened"},
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        409: {"model": ErrorResponse, "description": "Locator collision"},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
    summary="Shorten URL",
    description="Create or fetch the locator for a long URL. 201 when newly created, 200 when it already existed.",
)
async def shorten_url(request: Request, response: Response, body: ShortenRequest):
    """Shorten a URL."""
    service = request.app.state.service

    try:
        result = await service.shorten(body.url)
    except (InvalidURLError, LocatorConflictError, StorageUnavailableError) as e:
        raise_for_store_error(e)

    if not result.created:
        response.status_code = status.HTTP_200_OK

    return ShortenResponse(
        locator=result.locator,
        short_url=result.short_url,
        long_url=result.long_url,
        created_at=result.record.created_at,
        status=result.status.value,
    )


@router.get(
    "/urls",
    response_model=List[URLInfoResponse],
    summary="List recent URLs",
)
async def list_urls(request: Request, limit: int = Query(100, ge=1, le=1000)):
    """List recently shortened URLs, newest first."""
    service = request.app.state.service

    try:
        records = await service.list_recent(limit)
    except StorageUnavailableError as e:
        raise_for_store_error(e)

    return [
        URLInfoResponse(
            locator=record.locator,
            short_url=service.short_url_for(record.locator),
            long_url=record.long_url,
            created_at=record.created_at,
        )
        for record in records
    ]


@router.get(
    "/urls/{locator}",
    response_model=URLInfoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Locator not found"},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
    summary="Get URL information",
)
async def get_url_info(request: Request, locator: str):
    """Get information about a locator."""
    service = request.app.state.service

    try:
        info = await service.get_url_info(locator)
    except StorageUnavailableError as e:
        raise_for_store_error(e)

    if not info:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Locator '{locator}' not found",
        )

    return URLInfoResponse(**info)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    try:
        stats = await service.get_statistics()
    except StorageUnavailableError as e:
        raise_for_store_error(e)

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
