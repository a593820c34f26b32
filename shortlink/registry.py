"""Short code registry: creation, lookup and redirect resolution."""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .common.url_builder import ShortLinkBuilder
from .common.validators import is_valid_short_code, is_valid_url, is_valid_validity
from .errors import (
    ClickRecordingFailure,
    Expired,
    InvalidShortcode,
    InvalidUrl,
    InvalidValidity,
    NotFound,
    ShortcodeTaken,
)
from .events import (
    CLICK_FAILED,
    EventSink,
    NullEventSink,
    URL_ACCESSED,
    URL_CREATED,
    URL_EXPIRED,
    URL_NOT_FOUND,
)
from .models import ClickMetadata, ShortcodeRecord, utc_now
from .shortcode import ShortCodeGenerator
from .statistics import StatisticsTracker


class Registry:
    """Owns the mapping from short code to URL record.

    Records are never removed. An expired record stays readable for
    statistics and only refuses redirects.
    """

    def __init__(
        self,
        tracker: StatisticsTracker,
        short_link_builder: Callable[[str], str],
        short_code_generator: Optional[ShortCodeGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        events: Optional[EventSink] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
    ):
        """Initialize registry.

        Args:
            tracker: Statistics tracker that receives an entry per record
            short_link_builder: Maps a short code to its public short link
            short_code_generator: Optional short code generator
            clock: Callable returning the current aware datetime
            events: Sink for structured events
            logger: Optional logger
            max_collision_retries: Generated candidates tried per code length
                before the length grows
        """
        if max_collision_retries < 1:
            raise ValueError("max_collision_retries must be at least 1")

        self.tracker = tracker
        self.short_link_builder = short_link_builder
        self.generator = short_code_generator or ShortCodeGenerator()
        self.clock = clock or utc_now
        self.events = events or NullEventSink()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries
        self._records: Dict[str, ShortcodeRecord] = {}
        # Held for every check-and-insert, never across I/O
        self._lock = threading.Lock()

    @classmethod
    def with_base_url(
        cls,
        tracker: StatisticsTracker,
        base_url: str,
        path_prefix: str = "",
        **kwargs,
    ) -> "Registry":
        """Build a registry whose short links are ``base_url[/path_prefix]/<code>``."""
        return cls(tracker, ShortLinkBuilder(base_url, path_prefix), **kwargs)

    def create(
        self,
        original_url: str,
        validity_minutes: int,
        shortcode: Optional[str] = None,
    ) -> ShortcodeRecord:
        """Register a new short code.

        Args:
            original_url: The original long URL
            validity_minutes: Lifetime of the mapping in minutes
            shortcode: Optional caller-supplied short code

        Returns:
            The created record

        Raises:
            InvalidUrl: If the URL is not an absolute http(s) URL
            InvalidValidity: If validity is outside the allowed range
            InvalidShortcode: If the custom short code has a bad format
            ShortcodeTaken: If the custom short code is already registered
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidUrl(f"Invalid URL: {error}")

        is_valid, error = is_valid_validity(validity_minutes)
        if not is_valid:
            raise InvalidValidity(f"Invalid validity: {error}")

        if shortcode is not None:
            is_valid, error = is_valid_short_code(shortcode)
            if not is_valid:
                raise InvalidShortcode(f"Invalid short code: {error}")

        with self._lock:
            if shortcode is None:
                code = self._allocate_code()
            elif shortcode in self._records:
                raise ShortcodeTaken(shortcode)
            else:
                code = shortcode

            created_at = self.clock()
            record = ShortcodeRecord(
                shortcode=code,
                original_url=original_url,
                short_link=self.short_link_builder(code),
                created_at=created_at,
                expires_at=created_at + timedelta(minutes=validity_minutes),
            )
            self.tracker.open_entry(record)
            self._records[code] = record

        self.logger.info(f"Created short URL: {code} -> {original_url}")
        self.events.emit(
            URL_CREATED,
            shortcode=code,
            original_url=original_url,
            expiry=record.expires_at.isoformat(),
        )
        return record

    def _allocate_code(self) -> str:
        """Draw generated codes until one is free. Caller holds the lock."""
        for attempt, code in enumerate(self.generator.candidates(self.max_collision_retries)):
            if code not in self._records:
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code
        raise AssertionError("candidate stream ended")

    def resolve(
        self,
        shortcode: str,
        metadata: Optional[ClickMetadata] = None,
    ) -> str:
        """Resolve a short code for a redirect and record the click.

        A click that cannot be recorded is logged and does not fail the
        redirect.

        Args:
            shortcode: The short code being followed
            metadata: Request details for the click event

        Returns:
            The original URL

        Raises:
            NotFound: If no record exists for the short code
            Expired: If the record's expiry has passed
        """
        record = self.get(shortcode)
        if record is None:
            self.events.emit(URL_NOT_FOUND, shortcode=shortcode)
            raise NotFound(shortcode)

        if record.is_expired(self.clock()):
            self.events.emit(
                URL_EXPIRED,
                shortcode=shortcode,
                expiry=record.expires_at.isoformat(),
            )
            raise Expired(shortcode, record.expires_at)

        try:
            _, click_count = self.tracker.add_click(shortcode, metadata)
        except Exception as e:
            failure = ClickRecordingFailure(shortcode, e)
            self.logger.error(str(failure), exc_info=True)
            self.events.emit(CLICK_FAILED, shortcode=shortcode, error=str(e))
        else:
            self.events.emit(
                URL_ACCESSED,
                shortcode=shortcode,
                original_url=record.original_url,
                click_count=click_count,
            )

        return record.original_url

    def get(self, shortcode: str) -> Optional[ShortcodeRecord]:
        """Get the record for a short code.

        Args:
            shortcode: The short code to lookup

        Returns:
            The record if found, None otherwise
        """
        with self._lock:
            return self._records.get(shortcode)

    def exists(self, shortcode: str) -> bool:
        """Check if a short code is registered.

        Args:
            shortcode: The short code to check

        Returns:
            True if exists
        """
        with self._lock:
            return shortcode in self._records

    def size(self) -> int:
        """Number of records registered in this process."""
        with self._lock:
            return len(self._records)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, shortcode: str) -> bool:
        return self.exists(shortcode)
