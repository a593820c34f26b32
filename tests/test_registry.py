"""Tests for the short code registry."""

import itertools
from datetime import timedelta

import pytest

from shortlink.errors import (
    ClickRecordingFailure,
    Expired,
    InvalidShortcode,
    InvalidUrl,
    InvalidValidity,
    NotFound,
    ShortcodeTaken,
)
from shortlink.events import (
    CLICK_FAILED,
    URL_ACCESSED,
    URL_CREATED,
    URL_EXPIRED,
    URL_NOT_FOUND,
)
from shortlink.models import ClickMetadata
from shortlink.registry import Registry
from shortlink.shortcode import ShortCodeGenerator
from shortlink.statistics import StatisticsTracker


class ScriptedGenerator(ShortCodeGenerator):
    """Generator replaying a fixed sequence of candidates."""

    def __init__(self, codes):
        super().__init__(default_length=3)
        self._codes = iter(codes)

    def generate_random(self, length=None):
        return next(self._codes)


class BrokenTracker(StatisticsTracker):
    def add_click(self, shortcode, metadata=None):
        raise RuntimeError("statistics store unavailable")


class TestRegistryCreate:
    """Test short code registration."""

    def test_create_with_custom_code(self, registry, clock):
        """Scenario: explicit code, one minute validity."""
        now = clock.now

        record = registry.create("https://example.com/page", 1, "abc123")

        assert record.shortcode == "abc123"
        assert record.short_link == "http://testserver/abc123"
        assert record.created_at == now
        assert record.expires_at == now + timedelta(minutes=1)
        assert record.to_dict()["expiry"] == (now + timedelta(minutes=1)).isoformat()

    def test_create_generates_valid_unique_codes(self, registry):
        codes = {
            registry.create(f"https://example.com/{i}", 30).shortcode
            for i in range(200)
        }

        assert len(codes) == 200
        assert all(ShortCodeGenerator.is_valid_format(code) for code in codes)
        assert all(len(code) == 8 for code in codes)

    def test_create_opens_statistics_entry(self, registry, tracker):
        registry.create("https://example.com/page", 30, "abc123")

        stats = tracker.get_stats("abc123")
        assert stats.click_count == 0
        assert stats.record is registry.get("abc123")

    def test_create_emits_created_event(self, registry, events):
        record = registry.create("https://example.com/page", 5, "abc123")

        event = events.named(URL_CREATED)[-1]
        assert event.fields == {
            "shortcode": "abc123",
            "original_url": "https://example.com/page",
            "expiry": record.expires_at.isoformat(),
        }

    def test_invalid_url_leaves_registry_unchanged(self, registry, tracker):
        """Scenario: 'not-a-url' is rejected without inserting anything."""
        with pytest.raises(InvalidUrl):
            registry.create("not-a-url", 30)

        assert registry.size() == 0
        assert tracker.totals()["total_urls"] == 0

    @pytest.mark.parametrize("validity", [0, 10081, -1, 2.5, None])
    def test_invalid_validity(self, registry, validity):
        with pytest.raises(InvalidValidity):
            registry.create("https://example.com", validity, "abc123")

        assert not registry.exists("abc123")

    @pytest.mark.parametrize("validity", [1, 10080])
    def test_validity_bounds_accepted(self, registry, clock, validity):
        record = registry.create("https://example.com", validity)

        assert record.expires_at - record.created_at == timedelta(minutes=validity)

    @pytest.mark.parametrize("code", ["ab", "a" * 21, "bad code", "bad/code", "", "abc123\n", " abc123"])
    def test_invalid_custom_code(self, registry, code):
        with pytest.raises(InvalidShortcode):
            registry.create("https://example.com", 30, code)

        assert registry.size() == 0

    def test_duplicate_custom_code(self, registry, sample_urls):
        """Scenario: second create with the same explicit code fails."""
        registry.create(sample_urls[0], 30, "duplicate")

        with pytest.raises(ShortcodeTaken, match="already exists"):
            registry.create(sample_urls[1], 30, "duplicate")

        assert registry.size() == 1
        assert registry.get("duplicate").original_url == sample_urls[0]

    def test_custom_code_taken_by_expired_record(self, registry, clock):
        registry.create("https://example.com/a", 1, "reused")
        clock.advance(minutes=5)

        with pytest.raises(ShortcodeTaken):
            registry.create("https://example.com/b", 1, "reused")

    def test_validation_runs_before_uniqueness(self, registry):
        registry.create("https://example.com/a", 30, "taken")

        with pytest.raises(InvalidUrl):
            registry.create("not-a-url", 30, "taken")

    def test_generator_collisions_are_retried(self, tracker, clock, events):
        generator = ScriptedGenerator(["aaa", "aaa", "aaa", "bbb"])
        registry = Registry.with_base_url(
            tracker,
            base_url="http://testserver",
            short_code_generator=generator,
            clock=clock,
            events=events,
        )

        assert registry.create("https://example.com/1", 30).shortcode == "aaa"
        assert registry.create("https://example.com/2", 30).shortcode == "bbb"

    def test_generator_collision_with_custom_code(self, tracker, clock):
        generator = ScriptedGenerator(["custom", "fresh1"])
        registry = Registry.with_base_url(
            tracker,
            base_url="http://testserver",
            short_code_generator=generator,
            clock=clock,
        )
        registry.create("https://example.com/1", 30, "custom")

        assert registry.create("https://example.com/2", 30).shortcode == "fresh1"

    def test_exhausted_length_grows(self, tracker, clock):
        """A full code space at one length moves generation to longer codes."""
        generator = ShortCodeGenerator(default_length=3)
        generator.ALPHABET = "ab"
        registry = Registry.with_base_url(
            tracker,
            base_url="http://testserver",
            short_code_generator=generator,
            clock=clock,
            max_collision_retries=50,
        )
        for code in ("".join(p) for p in itertools.product("ab", repeat=3)):
            registry.create("https://example.com", 30, code)

        record = registry.create("https://example.com/next", 30)

        assert len(record.shortcode) > 3

    def test_max_collision_retries_must_be_positive(self, tracker):
        with pytest.raises(ValueError):
            Registry.with_base_url(tracker, base_url="http://testserver", max_collision_retries=0)

    def test_path_prefix_in_short_link(self, tracker, clock):
        registry = Registry.with_base_url(
            tracker, base_url="https://sho.rt/", path_prefix="/s", clock=clock,
        )

        assert registry.create("https://example.com", 30, "abc123").short_link == "https://sho.rt/s/abc123"


class TestRegistryResolve:
    """Test redirect resolution and expiry."""

    def test_expiry_scenario(self, registry, tracker, clock):
        """Create, follow once, expire after 61 seconds, stats still readable."""
        registry.create("https://example.com/page", 1, "abc123")

        assert registry.resolve("abc123") == "https://example.com/page"
        assert tracker.get_stats("abc123").click_count == 1

        clock.advance(seconds=61)

        with pytest.raises(Expired) as exc_info:
            registry.resolve("abc123")
        assert exc_info.value.expired_at == registry.get("abc123").expires_at

        stats = tracker.get_stats("abc123")
        assert stats.click_count == 1
        assert len(stats.clicks) == 1
        assert stats.record.original_url == "https://example.com/page"
        assert registry.exists("abc123")

    def test_resolve_at_exact_expiry_still_redirects(self, registry, clock):
        registry.create("https://example.com/page", 1, "edge01")
        clock.advance(minutes=1)

        assert registry.resolve("edge01") == "https://example.com/page"

        clock.advance(microseconds=1)
        with pytest.raises(Expired):
            registry.resolve("edge01")

    def test_resolve_unknown(self, registry, events):
        with pytest.raises(NotFound):
            registry.resolve("nothere")

        assert events.named(URL_NOT_FOUND)[-1].fields == {"shortcode": "nothere"}

    def test_resolve_records_metadata(self, registry, tracker):
        registry.create("https://example.com/page", 30, "abc123")

        registry.resolve("abc123", ClickMetadata(
            source="https://ref.example/",
            user_agent="agent/1.0",
            client_address="198.51.100.1",
        ))

        click = tracker.get_stats("abc123").clicks[0]
        assert click.source == "https://ref.example/"
        assert click.user_agent == "agent/1.0"
        assert click.client_address == "198.51.100.1"

    def test_resolve_emits_events(self, registry, events, clock):
        registry.create("https://example.com/page", 1, "abc123")
        registry.resolve("abc123")
        registry.resolve("abc123")
        clock.advance(minutes=2)
        with pytest.raises(Expired):
            registry.resolve("abc123")

        accessed = events.named(URL_ACCESSED)
        assert accessed[0].fields == {
            "shortcode": "abc123",
            "original_url": "https://example.com/page",
            "click_count": 1,
        }
        assert accessed[1].fields["click_count"] == 2
        assert events.named(URL_EXPIRED)[-1].fields["shortcode"] == "abc123"

    def test_expired_resolve_does_not_count(self, registry, tracker, clock):
        registry.create("https://example.com/page", 1, "abc123")
        clock.advance(minutes=2)

        with pytest.raises(Expired):
            registry.resolve("abc123")

        assert tracker.get_stats("abc123").click_count == 0

    def test_click_failure_does_not_block_redirect(self, clock, events):
        tracker = BrokenTracker(clock=clock, events=events)
        registry = Registry.with_base_url(
            tracker, base_url="http://testserver", clock=clock, events=events,
        )
        registry.create("https://example.com/page", 30, "abc123")

        assert registry.resolve("abc123") == "https://example.com/page"

        failure = events.named(CLICK_FAILED)[-1]
        assert failure.fields["shortcode"] == "abc123"
        assert "statistics store unavailable" in failure.fields["error"]
        assert not events.named(URL_ACCESSED)

    def test_click_recording_failure_message(self):
        failure = ClickRecordingFailure("abc123", RuntimeError("boom"))

        assert "abc123" in str(failure)
        assert isinstance(failure.cause, RuntimeError)


class TestRegistryLookup:
    """Test pure lookups."""

    def test_exists_and_get(self, registry):
        registry.create("https://example.com/page", 30, "abc123")

        assert registry.exists("abc123")
        assert "abc123" in registry
        assert not registry.exists("other")
        assert registry.get("other") is None
        assert len(registry) == 1

    def test_exists_has_no_side_effects(self, registry, tracker, events):
        registry.create("https://example.com/page", 30, "abc123")
        before = len(events.events)

        registry.exists("abc123")
        registry.exists("nothere")

        assert len(events.events) == before
        assert tracker.get_stats("abc123").click_count == 0
