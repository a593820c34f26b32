#!/usr/bin/env python3
"""
Main entry point for the shortlink service.

The store lives in process memory, so the service runs as a single uvicorn
worker; the async server and the thread-safe core handle concurrent
requests within it.

Usage:
    python app.py

Environment variables:
    BASE_URL - Base URL for short links
    PATH_PREFIX - Optional path prefix for short links
    HOST / PORT - Address to listen on
    SHORT_CODE_LENGTH - Starting length for generated codes
    DEFAULT_VALIDITY_MINUTES - Validity used when a request omits it
    LOG_LEVEL / LOG_FILE / LOG_JSON - Logging settings
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlink.common.logging_config import setup_logging
from shortlink.events import EventSink, LoggingEventSink
from shortlink.registry import Registry
from shortlink.service import ShortLinkService
from shortlink.shortcode import ShortCodeGenerator
from shortlink.statistics import StatisticsTracker
from web_app import create_app


def build_service(
    config: Config,
    logger: logging.Logger,
    clock: Optional[Callable[[], datetime]] = None,
    events: Optional[EventSink] = None,
) -> ShortLinkService:
    """Wire tracker, registry and service from configuration.

    Args:
        config: Configuration instance
        logger: Logger for operational messages
        clock: Optional clock override (tests)
        events: Optional event sink (defaults to logging events)

    Returns:
        Ready service instance
    """
    events = events or LoggingEventSink(logger.getChild("events"))

    tracker = StatisticsTracker(
        clock=clock,
        events=events,
        logger=logger.getChild("statistics"),
    )
    registry = Registry.with_base_url(
        tracker,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        clock=clock,
        events=events,
        logger=logger.getChild("registry"),
        max_collision_retries=config.max_collision_retries,
    )
    return ShortLinkService(
        registry=registry,
        tracker=tracker,
        logger=logger,
        default_validity_minutes=config.default_validity_minutes,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting shortlink service...")

    app.state.service = build_service(config, logger)

    logger.info(f"Short links will use base {config.base_url}")
    logger.info("Service started successfully")

    yield

    totals = app.state.service.tracker.totals()
    logger.info(
        f"Shutting down shortlink service "
        f"({totals['total_urls']} URLs, {totals['total_clicks']} clicks held in memory)"
    )
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Shortlink Service")
    logger.info(f"Configuration: {config.model_dump()}")

    app = create_app(
        service_instance=None,  # Will be set in lifespan
        config=config,
        logger=logger,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=1,
        log_level=config.log_level.lower(),
        access_log=False,  # LoggingMiddleware logs every request
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
