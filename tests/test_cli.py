"""Tests for the command-line client."""

import io
import json

import httpx
import pytest

from scripts.cli.shortlink_cli import ShortLinkCLI, build_parser, run


def read_json(stream: str) -> dict:
    return json.loads(stream)


@pytest.mark.asyncio
class TestShortLinkCLI:
    """Run CLI commands against the in-process app."""

    async def test_shorten_and_stats(self, client, capsys):
        code = await run(
            ["shorten", "https://example.com/cli", "--validity", "5", "--shortcode", "cli123"],
            client=client,
        )
        out = read_json(capsys.readouterr().out)

        assert code == 0
        assert out["success"] is True
        assert out["short_link"] == "http://testserver/cli123"

        code = await run(["stats", "cli123"], client=client)
        out = read_json(capsys.readouterr().out)

        assert code == 0
        assert out["statistics"]["originalUrl"] == "https://example.com/cli"
        assert out["statistics"]["clickCount"] == 0

    async def test_resolve_counts_click(self, client, capsys):
        await run(["shorten", "https://example.com/cli", "--shortcode", "cli456"], client=client)
        capsys.readouterr()

        code = await run(["resolve", "cli456"], client=client)
        out = read_json(capsys.readouterr().out)

        assert code == 0
        assert out["original_url"] == "https://example.com/cli"

        stats = (await client.get("/shorturls/cli456")).json()
        assert stats["clickCount"] == 1

    async def test_shorten_error_goes_to_stderr(self, client, capsys):
        code = await run(["shorten", "not-a-url"], client=client)
        captured = capsys.readouterr()

        assert code == 1
        err = read_json(captured.err)
        assert err["success"] is False
        assert "HTTP 400" in err["error"]

    async def test_resolve_unknown(self, client, capsys):
        code = await run(["resolve", "nothere"], client=client)

        assert code == 1
        assert "HTTP 404" in read_json(capsys.readouterr().err)["error"]

    async def test_list_and_health(self, client, capsys):
        await run(["shorten", "https://example.com/a"], client=client)
        await run(["shorten", "https://example.com/b"], client=client)
        capsys.readouterr()

        assert await run(["list"], client=client) == 0
        listing = read_json(capsys.readouterr().out)
        assert listing["count"] == 2

        assert await run(["health"], client=client) == 0
        health = read_json(capsys.readouterr().out)
        assert health["health"]["totalUrls"] == 2

    async def test_connection_error_reported(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = httpx.MockTransport(refuse)
        out, err = io.StringIO(), io.StringIO()
        async with httpx.AsyncClient(transport=transport, base_url="http://nowhere") as http:
            cli = ShortLinkCLI("http://nowhere", client=http, out=out, err=err)
            await cli.initialize()

            code = await cli.health()

        assert code == 1
        assert "Request failed" in json.loads(err.getvalue())["error"]
        assert out.getvalue() == ""

    async def test_no_command_prints_help(self, capsys):
        assert await run([]) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestParser:
    def test_shorten_arguments(self):
        args = build_parser().parse_args(
            ["--base-url", "http://sho.rt", "shorten", "https://example.com", "--validity", "10"]
        )

        assert args.base_url == "http://sho.rt"
        assert args.command == "shorten"
        assert args.validity == 10
        assert args.shortcode is None
