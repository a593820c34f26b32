"""Structured events emitted by the shortlink core.

Registry and tracker operations describe what happened as ``Event`` records
and hand them to an ``EventSink``. Formatting and output belong to the sink,
so the core can be exercised without capturing log output.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


URL_CREATED = "url.created"
URL_ACCESSED = "url.accessed"
URL_EXPIRED = "url.expired"
URL_NOT_FOUND = "url.not_found"
CLICK_RECORDED = "click.recorded"
CLICK_FAILED = "click.failed"
STATS_RETRIEVED = "stats.retrieved"
STATS_LISTED = "stats.listed"


@dataclass(frozen=True)
class Event:
    """A single structured event."""

    name: str
    fields: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class EventSink:
    """Receives events from the core. Subclasses override ``handle``."""

    def emit(self, name: str, **fields: Any) -> Optional[Event]:
        """Build an event and hand it to ``handle``.

        A failing sink never breaks the operation that emitted the event.

        Returns:
            The emitted event, or None if the sink failed
        """
        event = Event(name=name, fields=fields)
        try:
            self.handle(event)
        except Exception:
            logging.getLogger(__name__).exception(f"Event sink failed for {name}")
            return None
        return event

    def handle(self, event: Event) -> None:
        raise NotImplementedError


class NullEventSink(EventSink):
    """Drops every event."""

    def handle(self, event: Event) -> None:
        pass


class LoggingEventSink(EventSink):
    """Writes events through a logger.

    The message is ``<name> <json fields>``; the event name and fields are
    also attached to the record for the JSON formatter.
    """

    ERROR_EVENTS = frozenset({CLICK_FAILED})

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("shortlink.events")

    def handle(self, event: Event) -> None:
        level = logging.ERROR if event.name in self.ERROR_EVENTS else logging.INFO
        if not self.logger.isEnabledFor(level):
            return
        payload = json.dumps(event.fields, default=str, sort_keys=True)
        self.logger.log(
            level,
            f"{event.name} {payload}",
            extra={"event": event.name, "fields": event.fields},
        )


class EventRecorder(EventSink):
    """Keeps events in memory, optionally forwarding them to another sink."""

    def __init__(self, forward_to: Optional[EventSink] = None):
        self.forward_to = forward_to
        self._events: List[Event] = []
        self._lock = threading.Lock()

    def handle(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)
        if self.forward_to is not None:
            self.forward_to.handle(event)

    @property
    def events(self) -> List[Event]:
        with self._lock:
            return list(self._events)

    def named(self, name: str) -> List[Event]:
        """Return recorded events with the given name, oldest first."""
        return [event for event in self.events if event.name == name]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
