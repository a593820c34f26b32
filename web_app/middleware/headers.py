"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlink.common.headers import extract_forwarded_headers, resolve_client_address


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to extract X-Forwarded-* headers and the originating client."""

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and store forwarded details on request.state."""
        headers = dict(request.headers)
        forwarded = extract_forwarded_headers(headers)

        request.state.forwarded_proto = forwarded["forwarded_proto"]
        request.state.forwarded_host = forwarded["forwarded_host"]
        request.state.forwarded_for = forwarded["forwarded_for"]
        request.state.client_address = resolve_client_address(
            headers,
            request.client.host if request.client else None,
        )

        return await call_next(request)
