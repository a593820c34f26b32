"""Business logic service for shortlink."""

import logging
import time
from typing import Optional, Dict, Any, List

from .models import ClickMetadata, StatisticsEntry, URLSummary
from .registry import Registry
from .statistics import StatisticsTracker


DEFAULT_VALIDITY_MINUTES = 30


class ShortLinkService:
    """Service layer consumed by the HTTP app and the tests.

    Wraps one registry and its statistics tracker. Instances are built once
    per process and handed to request handlers through ``app.state``.
    """

    def __init__(
        self,
        registry: Registry,
        tracker: StatisticsTracker,
        logger: Optional[logging.Logger] = None,
        default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
    ):
        """Initialize shortlink service.

        Args:
            registry: Short code registry
            tracker: Statistics tracker shared with the registry
            logger: Optional logger
            default_validity_minutes: Validity applied when a request omits it
        """
        self.registry = registry
        self.tracker = tracker
        self.logger = logger or logging.getLogger(__name__)
        self.default_validity_minutes = default_validity_minutes
        self.started_at = time.monotonic()

    async def create_short_url(
        self,
        original_url: str,
        validity: Optional[int] = None,
        custom_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a new short URL.

        Args:
            original_url: The original long URL
            validity: Lifetime in minutes (defaults to default_validity_minutes)
            custom_code: Optional custom short code

        Returns:
            Dictionary with shortcode, short_link, original_url, created_at, expiry

        Raises:
            InvalidUrl, InvalidValidity, InvalidShortcode, ShortcodeTaken
        """
        if validity is None:
            validity = self.default_validity_minutes

        record = self.registry.create(original_url, validity, custom_code)

        return {
            "shortcode": record.shortcode,
            "short_link": record.short_link,
            "original_url": record.original_url,
            "created_at": record.created_at,
            "expiry": record.expires_at,
        }

    async def get_original_url(
        self,
        short_code: str,
        metadata: Optional[ClickMetadata] = None,
    ) -> str:
        """Get the original URL for a redirect, recording the click.

        Args:
            short_code: The short code to lookup
            metadata: Request details for the click event

        Returns:
            Original URL

        Raises:
            NotFound: If the short code is unknown
            Expired: If the short code has expired
        """
        return self.registry.resolve(short_code, metadata)

    async def get_url_stats(self, short_code: str) -> StatisticsEntry:
        """Get statistics for a short URL.

        Raises:
            NotFound: If the short code is unknown
        """
        return self.tracker.get_stats(short_code)

    async def list_urls(self) -> List[URLSummary]:
        """List every short URL in creation order."""
        return self.tracker.list_all()

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            **self.tracker.totals(),
            "default_validity_minutes": self.default_validity_minutes,
        }

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with health status and service statistics
        """
        return {
            "status": "healthy",
            "uptime_seconds": time.monotonic() - self.started_at,
            **await self.get_statistics(),
        }
