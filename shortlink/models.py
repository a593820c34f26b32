"""Data models for the shortlink core."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple


DIRECT_SOURCE = "Direct"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ShortcodeRecord:
    """Represents a short code mapping in the registry."""

    shortcode: str
    original_url: str
    short_link: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return True once ``now`` is strictly after the expiry."""
        return now > self.expires_at

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "shortcode": self.shortcode,
            "original_url": self.original_url,
            "short_link": self.short_link,
            "created_at": self.created_at.isoformat(),
            "expiry": self.expires_at.isoformat(),
        }


@dataclass(frozen=True)
class ClickMetadata:
    """Request details captured when a short code is followed."""

    source: Optional[str] = None
    user_agent: Optional[str] = None
    client_address: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class ClickEvent:
    """A single recorded access to a short code."""

    timestamp: datetime
    source: str = DIRECT_SOURCE
    user_agent: Optional[str] = None
    client_address: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_metadata(cls, timestamp: datetime, metadata: Optional[ClickMetadata]) -> "ClickEvent":
        """Build an event, defaulting an absent referrer to 'Direct'."""
        metadata = metadata or ClickMetadata()
        return cls(
            timestamp=timestamp,
            source=metadata.source or DIRECT_SOURCE,
            user_agent=metadata.user_agent,
            client_address=metadata.client_address,
            location=metadata.location,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
            "user_agent": self.user_agent,
            "client_address": self.client_address,
            "location": self.location,
        }


@dataclass(frozen=True)
class StatisticsEntry:
    """Read-only snapshot of a short code's access history."""

    record: ShortcodeRecord
    clicks: Tuple[ClickEvent, ...] = field(default_factory=tuple)

    @property
    def shortcode(self) -> str:
        return self.record.shortcode

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            **self.record.to_dict(),
            "click_count": self.click_count,
            "clicks": [click.to_dict() for click in self.clicks],
        }


@dataclass(frozen=True)
class URLSummary:
    """Per short code summary without click detail."""

    shortcode: str
    original_url: str
    short_link: str
    expires_at: datetime
    created_at: datetime
    click_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "shortcode": self.shortcode,
            "original_url": self.original_url,
            "short_link": self.short_link,
            "expiry": self.expires_at.isoformat(),
            "created_at": self.created_at.isoformat(),
            "click_count": self.click_count,
        }
