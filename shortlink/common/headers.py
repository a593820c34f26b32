"""Header parsing utilities for shortlink."""

from typing import Dict, Optional


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers dictionary

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    # Convert headers to lowercase for case-insensitive lookup
    headers_lower = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def resolve_client_address(
    headers: Dict[str, str],
    peer_address: Optional[str] = None,
) -> Optional[str]:
    """Determine the originating client address.

    Priority:
    1. First address in X-Forwarded-For (set by the proxy)
    2. Socket peer address

    Args:
        headers: Request headers
        peer_address: Address of the directly connected peer

    Returns:
        Client address or None if unknown
    """
    forwarded_for = extract_forwarded_headers(headers)["forwarded_for"]
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return peer_address or None
