"""API routes implementation."""

import logging
from typing import List

from fastapi import APIRouter, Request, HTTPException, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLSummaryResponse,
    URLStatsResponse,
    ClickResponse,
    HealthResponse,
    ErrorResponse,
)
from shortlink.errors import ShortLinkError
from shortlink.models import StatisticsEntry, URLSummary
from ..errors import to_http_exception

router = APIRouter()

logger = logging.getLogger("shortlink.web.api")


def _summary_response(summary: URLSummary) -> URLSummaryResponse:
    return URLSummaryResponse(
        shortcode=summary.shortcode,
        original_url=summary.original_url,
        short_link=summary.short_link,
        expiry=summary.expires_at,
        created_at=summary.created_at,
        click_count=summary.click_count,
    )


def _stats_response(entry: StatisticsEntry) -> URLStatsResponse:
    record = entry.record
    return URLStatsResponse(
        shortcode=record.shortcode,
        original_url=record.original_url,
        short_link=record.short_link,
        expiry=record.expires_at,
        created_at=record.created_at,
        click_count=entry.click_count,
        click_data=[
            ClickResponse(
                timestamp=click.timestamp,
                source=click.source,
                user_agent=click.user_agent,
                client_address=click.client_address,
                location=click.location,
            )
            for click in entry.clicks
        ],
    )


@router.post(
    "/shorturls",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a shortened URL with a validity in minutes. Optionally provide a custom short code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    # Blank custom code means "generate one"
    shortcode = body.shortcode if body.shortcode and body.shortcode.strip() else None

    try:
        result = await service.create_short_url(
            original_url=body.url,
            validity=body.validity,
            custom_code=shortcode,
        )
    except ShortLinkError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("Error creating short URL")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error: {str(e)}",
        )

    return ShortenResponse(
        short_link=result["short_link"],
        expiry=result["expiry"],
    )


@router.get(
    "/shorturls",
    response_model=List[URLSummaryResponse],
    summary="List short URLs",
    description="List every short URL with its click count, in creation order.",
)
async def list_urls(request: Request):
    """List all short URLs."""
    service = request.app.state.service

    summaries = await service.list_urls()

    return [_summary_response(summary) for summary in summaries]


@router.get(
    "/shorturls/{shortcode}",
    response_model=URLStatsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get URL statistics",
    description="Get a shortened URL with its full click history. Expired codes stay readable.",
)
async def get_url_stats(request: Request, shortcode: str):
    """Get statistics for a shortened URL."""
    service = request.app.state.service

    try:
        entry = await service.get_url_stats(shortcode)
    except ShortLinkError as e:
        raise to_http_exception(e)

    return _stats_response(entry)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status=health["status"],
        timestamp=datetime.now(timezone.utc),
        uptime=health["uptime_seconds"],
        total_urls=health["total_urls"],
        total_clicks=health["total_clicks"],
        default_validity_minutes=health["default_validity_minutes"],
    )
