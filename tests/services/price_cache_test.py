from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal

import pytest

from services.price_cache import PriceCache
from services.price_feed_client import PriceFeedError
from services.price_types import PriceQuote
from tests.helpers.price_feed import FakeClock, StubQuoteFeed, make_quote


def test_lookup_returns_latest_price_per_asset(price_cache: PriceCache) -> None:
    lookup = price_cache.lookup()

    assert lookup.price_of("ETH") == Decimal("2000")
    assert lookup.price_of("USDC") == Decimal("1")
    assert lookup.price_of("DOGE") is None
    assert lookup.price_of("") is None
    assert lookup.error is None
    assert lookup.is_loaded


def test_fresh_entry_is_served_without_refetch(
    price_cache: PriceCache, quote_feed: StubQuoteFeed, clock: FakeClock
) -> None:
    price_cache.lookup()
    clock.advance(seconds=59)
    price_cache.lookup()

    assert quote_feed.calls == 1


def test_stale_entry_is_refreshed(price_cache: PriceCache, quote_feed: StubQuoteFeed, clock: FakeClock) -> None:
    price_cache.lookup()
    quote_feed.quotes.append(make_quote("ETH", "2100", minutes=1))
    clock.advance(seconds=60)

    lookup = price_cache.lookup()

    assert quote_feed.calls == 2
    assert lookup.price_of("ETH") == Decimal("2100")


def test_failed_refresh_keeps_previous_prices_and_reports_error(
    price_cache: PriceCache, quote_feed: StubQuoteFeed, clock: FakeClock
) -> None:
    price_cache.lookup()
    quote_feed.error = PriceFeedError("Request failed", status_code=503)
    clock.advance(seconds=90)

    lookup = price_cache.lookup()

    assert lookup.error == "Request failed"
    assert lookup.price_of("ETH") == Decimal("2000")

    quote_feed.error = None
    recovered = price_cache.lookup()
    assert recovered.error is None


def test_failed_refresh_drops_prices_past_retention(
    price_cache: PriceCache, quote_feed: StubQuoteFeed, clock: FakeClock
) -> None:
    price_cache.lookup()
    quote_feed.error = PriceFeedError("Request failed")
    clock.advance(minutes=6)

    lookup = price_cache.lookup()

    assert lookup.error == "Request failed"
    assert lookup.quotes == {}
    assert not lookup.is_loaded


def test_first_load_failure_yields_empty_lookup(clock: FakeClock) -> None:
    feed = StubQuoteFeed()
    feed.error = PriceFeedError("")
    cache = PriceCache(feed, clock=clock)

    lookup = cache.lookup()

    assert lookup.quotes == {}
    assert lookup.error == "Failed to load prices"


def test_invalidate_forces_refresh(price_cache: PriceCache, quote_feed: StubQuoteFeed) -> None:
    price_cache.lookup()
    price_cache.invalidate()
    price_cache.lookup()

    assert quote_feed.calls == 2


def test_lookup_is_a_snapshot(price_cache: PriceCache, quote_feed: StubQuoteFeed) -> None:
    first = price_cache.lookup()
    price_cache.invalidate()
    quote_feed.quotes = [make_quote("ETH", "1")]
    price_cache.lookup()

    assert first.price_of("ETH") == Decimal("2000")


def test_retention_must_cover_freshness_window(quote_feed: StubQuoteFeed) -> None:
    with pytest.raises(ValueError):
        PriceCache(quote_feed, stale_after=timedelta(minutes=5), retain_for=timedelta(minutes=1))


class _SlowFeed:
    def __init__(self) -> None:
        self.calls = 0
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch_quotes(self) -> list[PriceQuote]:
        self.calls += 1
        self.started.set()
        self.release.wait(timeout=5)
        return [make_quote("ETH", "2000")]


def test_concurrent_lookups_share_one_refresh() -> None:
    feed = _SlowFeed()
    cache = PriceCache(feed)
    results = []

    def worker() -> None:
        results.append(cache.lookup())

    threads = [threading.Thread(target=worker) for _ in range(4)]
    threads[0].start()
    feed.started.wait(timeout=5)
    for thread in threads[1:]:
        thread.start()
    feed.release.set()
    for thread in threads:
        thread.join(timeout=5)

    assert feed.calls == 1
    assert len(results) == 4
    assert {lookup.price_of("ETH") for lookup in results} == {Decimal("2000")}
