"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from datetime import datetime


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"}
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    result: str = Field(..., description="The complete short URL")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"result": "http://localhost:8080/AbCd1234"}
            ]
        }
    }


class BatchRequestItem(BaseModel):
    """One URL of a batch shorten request."""

    correlation_id: str = Field(..., description="Client-side id echoed in the response")
    original_url: str = Field(..., description="The URL to shorten")


class BatchResponseItem(BaseModel):
    """One short URL of a batch shorten response."""

    correlation_id: str
    short_url: str


class UserURLResponse(BaseModel):
    """A link owned by the requesting user."""

    short_url: str
    original_url: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    message: str = Field(..., description="Error message")
