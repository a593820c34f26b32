"""Per short code access statistics."""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from .errors import NotFound
from .events import (
    CLICK_RECORDED,
    EventSink,
    NullEventSink,
    STATS_LISTED,
    STATS_RETRIEVED,
)
from .models import (
    ClickEvent,
    ClickMetadata,
    ShortcodeRecord,
    StatisticsEntry,
    URLSummary,
    utc_now,
)


class _Entry:
    """Mutable click history for one short code, guarded by its own lock."""

    __slots__ = ("record", "clicks", "lock")

    def __init__(self, record: ShortcodeRecord):
        self.record = record
        self.clicks: List[ClickEvent] = []
        self.lock = threading.Lock()


class StatisticsTracker:
    """Owns the click history of every registered short code.

    Entries are keyed by short code and created by the registry at
    registration time. Recording a click locks only the entry being written,
    so clicks on different short codes proceed in parallel.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        events: Optional[EventSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize statistics tracker.

        Args:
            clock: Callable returning the current aware datetime
            events: Sink for structured events
            logger: Optional logger
        """
        self.clock = clock or utc_now
        self.events = events or NullEventSink()
        self.logger = logger or logging.getLogger(__name__)
        self._entries: Dict[str, _Entry] = {}
        # Guards the dict itself; entry contents have their own locks
        self._lock = threading.Lock()

    def open_entry(self, record: ShortcodeRecord) -> None:
        """Create the empty statistics entry for a newly registered record.

        Args:
            record: The record just inserted into the registry

        Raises:
            ValueError: If an entry already exists for the short code
        """
        with self._lock:
            if record.shortcode in self._entries:
                raise ValueError(f"Statistics entry for '{record.shortcode}' already exists")
            self._entries[record.shortcode] = _Entry(record)
        self.logger.debug(f"Opened statistics entry for {record.shortcode}")

    def _get_entry(self, shortcode: str) -> _Entry:
        with self._lock:
            entry = self._entries.get(shortcode)
        if entry is None:
            raise NotFound(shortcode)
        return entry

    def record_click(
        self,
        shortcode: str,
        metadata: Optional[ClickMetadata] = None,
    ) -> ClickEvent:
        """Append a click to a short code's history.

        Args:
            shortcode: The short code that was followed
            metadata: Request details (referrer, user agent, client address)

        Returns:
            The recorded click event

        Raises:
            NotFound: If no entry exists for the short code
        """
        event, _ = self.add_click(shortcode, metadata)
        return event

    def add_click(
        self,
        shortcode: str,
        metadata: Optional[ClickMetadata] = None,
    ) -> Tuple[ClickEvent, int]:
        """Append a click and return it with the count it committed."""
        entry = self._get_entry(shortcode)

        # Timestamp is taken under the lock so commit order matches time order
        with entry.lock:
            event = ClickEvent.from_metadata(self.clock(), metadata)
            entry.clicks.append(event)
            click_count = len(entry.clicks)

        self.events.emit(
            CLICK_RECORDED,
            shortcode=shortcode,
            click_count=click_count,
            source=event.source,
        )
        return event, click_count

    def get_stats(self, shortcode: str) -> StatisticsEntry:
        """Get a snapshot of a short code's statistics.

        Args:
            shortcode: The short code to look up

        Returns:
            Immutable statistics snapshot with every click in order

        Raises:
            NotFound: If no entry exists for the short code
        """
        entry = self._get_entry(shortcode)
        with entry.lock:
            snapshot = StatisticsEntry(record=entry.record, clicks=tuple(entry.clicks))

        self.events.emit(STATS_RETRIEVED, shortcode=shortcode, click_count=snapshot.click_count)
        return snapshot

    def list_all(self) -> List[URLSummary]:
        """List a summary of every short code in creation order.

        Returns:
            List of summaries without click detail
        """
        with self._lock:
            entries = list(self._entries.values())

        summaries = []
        for entry in entries:
            with entry.lock:
                click_count = len(entry.clicks)
            record = entry.record
            summaries.append(URLSummary(
                shortcode=record.shortcode,
                original_url=record.original_url,
                short_link=record.short_link,
                expires_at=record.expires_at,
                created_at=record.created_at,
                click_count=click_count,
            ))

        self.events.emit(STATS_LISTED, count=len(summaries))
        return summaries

    def totals(self) -> Dict[str, int]:
        """Get service-wide counters.

        Returns:
            Dictionary with total_urls and total_clicks
        """
        with self._lock:
            entries = list(self._entries.values())

        total_clicks = 0
        for entry in entries:
            with entry.lock:
                total_clicks += len(entry.clicks)

        return {
            "total_urls": len(entries),
            "total_clicks": total_clicks,
        }

    def __contains__(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._entries
