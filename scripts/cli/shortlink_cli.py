#!/usr/bin/env python3
"""
Command-line client for a running shortlink service.

The store lives inside the service process, so every command goes over HTTP.

Usage:
    python shortlink_cli.py shorten <url> [--validity MINUTES] [--shortcode CODE]
    python shortlink_cli.py resolve <shortcode>
    python shortlink_cli.py stats <shortcode>
    python shortlink_cli.py list
    python shortlink_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Any, Dict, Optional, TextIO, Tuple

import httpx

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from shortlink.common.logging_config import setup_logging


DEFAULT_BASE_URL = "http://localhost:3001"


class ShortLinkCLI:
    """Command-line interface for shortlink."""

    def __init__(
        self,
        base_url: str,
        verbose: bool = False,
        client: Optional[httpx.AsyncClient] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        timeout: float = 10.0,
    ):
        """Initialize CLI.

        Args:
            base_url: Base URL of the running service
            verbose: Verbose output
            client: Optional pre-built HTTP client (not closed by cleanup)
            out: Stream for results (defaults to stdout)
            err: Stream for errors (defaults to stderr)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.verbose = verbose
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.client = client
        self._owns_client = client is None
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.timeout = timeout

    async def initialize(self):
        """Create the HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        self.logger.debug(f"Using service at {self.base_url}")

    async def cleanup(self):
        """Close the HTTP client if this CLI created it."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None

    def _print(self, payload: Dict[str, Any], success: bool) -> int:
        stream = self.out if success else self.err
        print(json.dumps({"success": success, **payload}, indent=2), file=stream)
        return 0 if success else 1

    async def _request(self, method: str, path: str, **kwargs) -> Tuple[Optional[httpx.Response], Optional[str]]:
        """Send a request, returning (response, None) or (None, error message)."""
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            self.logger.debug(f"{method} {path} failed: {e!r}")
            return None, f"Request failed: {e}"
        self.logger.debug(f"{method} {path} -> {response.status_code}")
        return response, None

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            detail = response.json().get("detail")
        except ValueError:
            detail = None
        return f"HTTP {response.status_code}: {detail or response.text}"

    async def shorten(
        self,
        url: str,
        validity: Optional[int] = None,
        shortcode: Optional[str] = None,
    ) -> int:
        """Shorten a URL."""
        body: Dict[str, Any] = {"url": url}
        if validity is not None:
            body["validity"] = validity
        if shortcode:
            body["shortcode"] = shortcode

        response, error = await self._request("POST", "/shorturls", json=body)
        if error:
            return self._print({"error": error}, False)
        if response.status_code != 201:
            return self._print({"error": self._error_detail(response)}, False)

        data = response.json()
        return self._print({
            "short_link": data["shortLink"],
            "expiry": data["expiry"],
            "message": f"Successfully shortened URL to: {data['shortLink']}",
        }, True)

    async def resolve(self, shortcode: str) -> int:
        """Follow a short code once, without following the redirect.

        This counts as a click.
        """
        response, error = await self._request("GET", f"/{shortcode}", follow_redirects=False)
        if error:
            return self._print({"error": error}, False)
        if not response.is_redirect:
            return self._print({"error": self._error_detail(response)}, False)

        return self._print({
            "shortcode": shortcode,
            "original_url": response.headers["location"],
        }, True)

    async def stats(self, shortcode: str) -> int:
        """Get statistics for a short code."""
        response, error = await self._request("GET", f"/shorturls/{shortcode}")
        if error:
            return self._print({"error": error}, False)
        if response.status_code != 200:
            return self._print({"error": self._error_detail(response)}, False)

        return self._print({"statistics": response.json()}, True)

    async def list_urls(self) -> int:
        """List all short URLs."""
        response, error = await self._request("GET", "/shorturls")
        if error:
            return self._print({"error": error}, False)
        if response.status_code != 200:
            return self._print({"error": self._error_detail(response)}, False)

        urls = response.json()
        return self._print({"count": len(urls), "urls": urls}, True)

    async def health(self) -> int:
        """Check service health."""
        response, error = await self._request("GET", "/health")
        if error:
            return self._print({"error": error}, False)
        if response.status_code != 200:
            return self._print({"error": self._error_detail(response)}, False)

        data = response.json()
        return self._print({"health": data}, data.get("status") == "healthy")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Shortlink CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL for 30 minutes (service default)
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom code, valid for two hours
  %(prog)s shorten https://example.com/long/url --validity 120 --shortcode mylink

  # Follow a short code (counts as a click)
  %(prog)s resolve mylink

  # Get statistics
  %(prog)s stats mylink

  # List all URLs
  %(prog)s list

  # Check health
  %(prog)s health
        """
    )

    parser.add_argument(
        "--base-url",
        default=os.getenv("SHORTLINK_BASE_URL", DEFAULT_BASE_URL),
        help=f"Service base URL (default: from SHORTLINK_BASE_URL env or {DEFAULT_BASE_URL})"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--validity", type=int, help="Validity in minutes (1-10080)")
    shorten_parser.add_argument("--shortcode", help="Custom short code")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code (records a click)")
    resolve_parser.add_argument("shortcode", help="Short code to resolve")

    stats_parser = subparsers.add_parser("stats", help="Get URL statistics")
    stats_parser.add_argument("shortcode", help="Short code to get stats for")

    subparsers.add_parser("list", help="List all URLs")

    subparsers.add_parser("health", help="Check service health")

    return parser


async def run(argv=None, client: Optional[httpx.AsyncClient] = None) -> int:
    """Parse arguments and execute one command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortLinkCLI(
        base_url=args.base_url,
        verbose=args.verbose,
        client=client,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.validity, args.shortcode)
        elif args.command == "resolve":
            return await cli.resolve(args.shortcode)
        elif args.command == "stats":
            return await cli.stats(args.shortcode)
        elif args.command == "list":
            return await cli.list_urls()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


def main():
    """Main entry point."""
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
