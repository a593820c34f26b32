"""Validation utilities for the shortlink core."""

import re
from urllib.parse import urlparse
from typing import Tuple


MAX_URL_LENGTH = 2048

MIN_VALIDITY_MINUTES = 1
MAX_VALIDITY_MINUTES = 10080  # one week

SHORT_CODE_RE = re.compile(r"[a-zA-Z0-9_-]+")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.hostname:
            return False, "URL must have a valid domain"

        # Accessing .port raises on a malformed port
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(short_code: str, min_length: int = 3, max_length: int = 20) -> Tuple[bool, str]:
    """Validate a short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    # Only allow alphanumeric characters, hyphens, and underscores
    if not SHORT_CODE_RE.fullmatch(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    return True, ""


def is_valid_validity(validity_minutes) -> Tuple[bool, str]:
    """Validate a validity period.

    Args:
        validity_minutes: Requested lifetime in whole minutes

    Returns:
        Tuple of (is_valid, error_message)
    """
    # bool is an int subclass; True is not a duration
    if isinstance(validity_minutes, bool) or not isinstance(validity_minutes, int):
        return False, "Validity must be a whole number of minutes"

    if not MIN_VALIDITY_MINUTES <= validity_minutes <= MAX_VALIDITY_MINUTES:
        return False, (
            f"Validity must be between {MIN_VALIDITY_MINUTES} "
            f"and {MAX_VALIDITY_MINUTES} minutes"
        )

    return True, ""
