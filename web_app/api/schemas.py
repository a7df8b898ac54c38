"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Literal
from datetime import datetime


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The long URL to shorten", min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/a/b?c=1"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    locator: str = Field(..., description="The locator")
    short_url: str = Field(..., description="The complete short URL")
    long_url: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Timestamp of first insertion")
    status: Literal["created", "existing"] = Field(..., description="Whether the record was just created")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "locator": "1f0c2a9",
                    "short_url": "http://yaus.pw/1f0c2a9",
                    "long_url": "https://example.com/a/b?c=1",
                    "created_at": "2024-01-01T12:00:00Z",
                    "status": "created",
                }
            ]
        }
    }


class URLInfoResponse(BaseModel):
    """Response with locator information."""

    locator: str
    short_url: str
    long_url: str
    created_at: datetime


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_urls: int
    database: str
    cache_enabled: bool
