"""Core business logic for shortlink."""

from .errors import (
    ShortLinkError,
    InvalidUrl,
    InvalidValidity,
    InvalidShortcode,
    ShortcodeTaken,
    NotFound,
    Expired,
    ClickRecordingFailure,
)
from .models import ClickMetadata, ClickEvent, ShortcodeRecord, StatisticsEntry, URLSummary
from .shortcode import ShortCodeGenerator
from .statistics import StatisticsTracker
from .registry import Registry
from .service import ShortLinkService

__all__ = [
    "ShortLinkError",
    "InvalidUrl",
    "InvalidValidity",
    "InvalidShortcode",
    "ShortcodeTaken",
    "NotFound",
    "Expired",
    "ClickRecordingFailure",
    "ClickMetadata",
    "ClickEvent",
    "ShortcodeRecord",
    "StatisticsEntry",
    "URLSummary",
    "ShortCodeGenerator",
    "StatisticsTracker",
    "Registry",
    "ShortLinkService",
]
