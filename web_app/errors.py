"""Mapping of core errors onto HTTP responses."""

from fastapi import HTTPException, status

from shortlink.errors import (
    ShortLinkError,
    ValidationError,
    ShortcodeTaken,
    NotFound,
    Expired,
)


# Checked in order; first match wins
ERROR_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ShortcodeTaken, status.HTTP_409_CONFLICT),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Expired, status.HTTP_410_GONE),
)


def status_for(error: ShortLinkError) -> int:
    """Status code for a core error (500 for anything unmapped)."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: ShortLinkError) -> HTTPException:
    """Convert a core error into an HTTPException carrying its message."""
    return HTTPException(status_code=status_for(error), detail=str(error))
