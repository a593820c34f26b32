"""Pydantic schemas for API requests and responses.

JSON keys are camelCase on the wire (``shortLink``, ``clickCount``); the
Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(BaseModel):
    """Request to shorten a URL.

    Format checks are left to the registry so every rejection maps to the
    same error responses.
    """

    url: str = Field(..., description="The URL to shorten")
    validity: Optional[int] = Field(None, description="Validity in minutes (default 30)")
    shortcode: Optional[str] = Field(None, description="Optional custom short code")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "validity": 30,
                },
                {
                    "url": "https://github.com/user/repo",
                    "validity": 120,
                    "shortcode": "myrepo",
                }
            ]
        }
    }


class ShortenResponse(CamelModel):
    """Response after shortening a URL."""

    short_link: str = Field(..., description="The complete short link")
    expiry: datetime = Field(..., description="Expiry timestamp")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "shortLink": "http://localhost:3001/abc123",
                    "expiry": "2024-01-01T12:30:00Z"
                }
            ]
        },
    )


class ClickResponse(CamelModel):
    """A single recorded click."""

    timestamp: datetime
    source: str
    user_agent: Optional[str] = None
    client_address: Optional[str] = None
    location: Optional[str] = None


class URLSummaryResponse(CamelModel):
    """Summary of a short URL without click detail."""

    shortcode: str
    original_url: str
    short_link: str
    expiry: datetime
    created_at: datetime
    click_count: int


class URLStatsResponse(URLSummaryResponse):
    """Full statistics for a short URL."""

    click_data: List[ClickResponse] = Field(default_factory=list)


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    timestamp: datetime = Field(..., description="Check timestamp")
    uptime: float = Field(..., description="Seconds since the service started")
    total_urls: int
    total_clicks: int
    default_validity_minutes: int


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
