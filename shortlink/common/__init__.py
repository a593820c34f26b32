"""Common utilities for shortlink."""

from .validators import is_valid_url, is_valid_short_code, is_valid_validity
from .headers import extract_forwarded_headers, resolve_client_address
from .url_builder import build_short_url, ShortLinkBuilder
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_valid_validity",
    "extract_forwarded_headers",
    "resolve_client_address",
    "build_short_url",
    "ShortLinkBuilder",
    "setup_logging",
    "get_logger",
]
