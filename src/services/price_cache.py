from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Mapping, Protocol

from config import config
from domain.pricing import latest_quotes, price_of

from .price_feed_client import PriceFeedClient, PriceFeedError
from .price_types import PriceQuote

logger = logging.getLogger(__name__)

PRICES_CACHE_KEY = "prices"


class QuoteFeed(Protocol):
    def fetch_quotes(self) -> list[PriceQuote]: ...


@dataclass(frozen=True)
class PriceLookup:
    """Latest price per asset, plus the feed error of the last refresh, if any."""

    quotes: Mapping[str, PriceQuote] = field(default_factory=dict)
    error: str | None = None
    fetched_at: datetime | None = None

    def price_of(self, symbol: str | None) -> Decimal | None:
        return price_of(self.quotes, symbol)

    @property
    def is_loaded(self) -> bool:
        return self.fetched_at is not None


@dataclass
class _CacheEntry:
    quotes: dict[str, PriceQuote]
    fetched_at: datetime
    invalidated: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PriceCache:
    def __init__(
        self,
        feed: QuoteFeed,
        *,
        stale_after: timedelta = timedelta(seconds=60),
        retain_for: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if retain_for < stale_after:
            msg = "retain_for must be >= stale_after"
            raise ValueError(msg)
        self.feed = feed
        self.stale_after = stale_after
        self.retain_for = retain_for
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._error: str | None = None
        self._lock = threading.Lock()

    def lookup(self) -> PriceLookup:
        entry = self._entries.get(PRICES_CACHE_KEY)
        if entry is not None and self._is_fresh(entry, self._clock()):
            return self._snapshot(entry, self._error)

        with self._lock:
            entry = self._entries.get(PRICES_CACHE_KEY)
            # Another caller may have refreshed while we waited on the lock.
            if entry is not None and self._is_fresh(entry, self._clock()):
                return self._snapshot(entry, self._error)
            return self._refresh()

    def invalidate(self) -> None:
        with self._lock:
            entry = self._entries.get(PRICES_CACHE_KEY)
            if entry is not None:
                entry.invalidated = True

    def _refresh(self) -> PriceLookup:
        try:
            fetched = self.feed.fetch_quotes()
        except PriceFeedError as exc:
            logger.warning("Price feed refresh failed: %s", exc)
            self._error = str(exc) or "Failed to load prices"
            entry = self._entries.get(PRICES_CACHE_KEY)
            if entry is not None and self._clock() - entry.fetched_at > self.retain_for:
                del self._entries[PRICES_CACHE_KEY]
                entry = None
            return self._snapshot(entry, self._error)

        entry = _CacheEntry(quotes=latest_quotes(fetched), fetched_at=self._clock())
        self._entries[PRICES_CACHE_KEY] = entry
        self._error = None
        logger.info("Loaded %d asset prices", len(entry.quotes))
        return self._snapshot(entry, None)

    def _is_fresh(self, entry: _CacheEntry, now: datetime) -> bool:
        return not entry.invalidated and now - entry.fetched_at < self.stale_after

    @staticmethod
    def _snapshot(entry: _CacheEntry | None, error: str | None) -> PriceLookup:
        if entry is None:
            return PriceLookup(error=error)
        return PriceLookup(quotes=dict(entry.quotes), error=error, fetched_at=entry.fetched_at)


def build_default_cache() -> PriceCache:
    settings = config()
    return PriceCache(
        PriceFeedClient(),
        stale_after=timedelta(seconds=settings.price_stale_seconds),
        retain_for=timedelta(seconds=settings.price_retention_seconds),
    )


__all__ = ["PRICES_CACHE_KEY", "PriceCache", "PriceLookup", "QuoteFeed", "build_default_cache"]
