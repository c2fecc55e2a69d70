from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from services.price_feed_client import PriceFeedError
from services.price_types import PriceQuote

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_quote(symbol: str, price: str, *, minutes: int = 0) -> PriceQuote:
    return PriceQuote(asset_symbol=symbol, as_of=BASE_TIME + timedelta(minutes=minutes), price=Decimal(price))


class StubQuoteFeed:
    """Feed returning canned quotes; set ``error`` to make the next fetches fail."""

    def __init__(self, quotes: list[PriceQuote] | None = None) -> None:
        self.quotes = list(quotes or [])
        self.error: PriceFeedError | None = None
        self.calls = 0

    def fetch_quotes(self) -> list[PriceQuote]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.quotes)


class FakeClock:
    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


__all__ = ["BASE_TIME", "FakeClock", "StubQuoteFeed", "make_quote"]
