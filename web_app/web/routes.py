"""Redirect route implementation."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from shortlink.common.headers import resolve_client_address
from shortlink.errors import ShortLinkError
from shortlink.models import ClickMetadata
from ..errors import to_http_exception

router = APIRouter()

# Coarse location set by an upstream geo-aware proxy, if any
LOCATION_HEADER = "x-geo-location"


def click_metadata_from_request(request: Request) -> ClickMetadata:
    """Collect the click details recorded for a redirect."""
    # Set by ForwardedHeadersMiddleware; resolved here when the route runs without it
    client_address = getattr(request.state, "client_address", None)
    if client_address is None:
        peer = request.client.host if request.client else None
        client_address = resolve_client_address(dict(request.headers), peer)

    return ClickMetadata(
        source=request.headers.get("referer"),
        user_agent=request.headers.get("user-agent"),
        client_address=client_address,
        location=request.headers.get(LOCATION_HEADER),
    )


@router.get("/{shortcode}", include_in_schema=False)
async def redirect_to_url(request: Request, shortcode: str):
    """Redirect to the original URL."""
    service = request.app.state.service

    # Records the click; unknown codes give 404, expired ones 410
    try:
        original_url = await service.get_original_url(
            shortcode,
            metadata=click_metadata_from_request(request),
        )
    except ShortLinkError as e:
        raise to_http_exception(e)

    # Temporary redirect so every visit reaches us and is counted
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
