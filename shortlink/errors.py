"""Errors raised by the shortlink core.

The HTTP layer maps these onto status codes; the core itself knows nothing
about transport.
"""

from datetime import datetime
from typing import Optional


class ShortLinkError(Exception):
    """Base class for all shortlink errors."""


class ValidationError(ShortLinkError, ValueError):
    """Request input was rejected before any state was touched."""


class InvalidUrl(ValidationError):
    """URL is not an absolute http(s) URL."""


class InvalidValidity(ValidationError):
    """Validity is not a whole number of minutes in the allowed range."""


class InvalidShortcode(ValidationError):
    """Custom short code does not match the short code format."""


class ShortcodeTaken(ShortLinkError, ValueError):
    """A caller-supplied short code is already registered."""

    def __init__(self, shortcode: str):
        super().__init__(f"Short code '{shortcode}' already exists")
        self.shortcode = shortcode


class NotFound(ShortLinkError, LookupError):
    """No record exists for the short code."""

    def __init__(self, shortcode: str):
        super().__init__(f"Short code '{shortcode}' not found")
        self.shortcode = shortcode


class Expired(ShortLinkError):
    """The short code exists but its expiry has passed."""

    def __init__(self, shortcode: str, expired_at: Optional[datetime] = None):
        super().__init__(f"Short code '{shortcode}' has expired")
        self.shortcode = shortcode
        self.expired_at = expired_at


class ClickRecordingFailure(ShortLinkError):
    """A click could not be recorded. Never propagated past resolve."""

    def __init__(self, shortcode: str, cause: BaseException):
        super().__init__(f"Failed to record click for '{shortcode}': {cause}")
        self.shortcode = shortcode
        self.cause = cause
