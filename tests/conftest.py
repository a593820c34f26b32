"""Pytest configuration and fixtures."""

import threading
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from app import build_service
from config import Config
from shortlink.common.logging_config import setup_logging
from shortlink.events import EventRecorder
from shortlink.registry import Registry
from shortlink.service import ShortLinkService
from shortlink.shortcode import ShortCodeGenerator
from shortlink.statistics import StatisticsTracker
from web_app import create_app


BASE_URL = "http://testserver"


class FakeClock:
    """Controllable clock; every reading advances by ``tick``."""

    def __init__(self, start: datetime, tick: timedelta = timedelta(0)):
        self.now = start
        self.tick = tick
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            current = self.now
            self.now = current + self.tick
            return current

    def advance(self, **kwargs) -> None:
        with self._lock:
            self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    """Simulated clock starting at a fixed instant."""
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def events():
    """In-memory event sink."""
    return EventRecorder()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=8)


@pytest.fixture
def tracker(clock, events, logger) -> StatisticsTracker:
    """Create statistics tracker."""
    return StatisticsTracker(clock=clock, events=events, logger=logger)


@pytest.fixture
def registry(tracker, short_code_generator, clock, events, logger) -> Registry:
    """Create registry with a fixed base URL."""
    return Registry.with_base_url(
        tracker,
        base_url=BASE_URL,
        short_code_generator=short_code_generator,
        clock=clock,
        events=events,
        logger=logger,
    )


@pytest.fixture
def service(registry, tracker, logger) -> ShortLinkService:
    """Create service instance."""
    return ShortLinkService(registry=registry, tracker=tracker, logger=logger)


@pytest.fixture
def config():
    """Configuration pointing short links at the test server."""
    return Config(base_url=BASE_URL)


@pytest.fixture
def app(config, logger, clock, events):
    """Create test FastAPI app backed by a fresh service."""
    service = build_service(config, logger, clock=clock, events=events)
    return create_app(service_instance=service, config=config, logger=logger)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
