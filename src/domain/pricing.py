from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Iterable, Mapping, Union

from services.price_types import PriceQuote

Number = Union[Decimal, float, int]

ZERO = Decimal(0)


@dataclass(frozen=True)
class SwapQuote:
    rate: Decimal
    receive_amount: Decimal

    @property
    def can_quote(self) -> bool:
        return self.rate > 0 and self.receive_amount > 0


def as_decimal(value: Number | str | None) -> Decimal:
    """Coerce a number to Decimal; anything unusable becomes NaN."""
    if value is None or isinstance(value, bool):
        return Decimal("NaN")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("NaN")


def _bounded(result: Decimal) -> Decimal:
    # Anything a double cannot hold counts as overflow.
    if not result.is_finite() or not math.isfinite(float(result)):
        return ZERO
    return result


def rate(price_from: Number | None, price_to: Number | None) -> Decimal:
    """Units of the target asset received per unit of the source asset.

    Unknown, non-finite or zero prices all yield 0, which callers read as
    "cannot quote yet".
    """
    p_from = as_decimal(price_from)
    p_to = as_decimal(price_to)
    if not p_from.is_finite() or not p_to.is_finite() or p_to.is_zero():
        return ZERO
    with localcontext() as ctx:
        ctx.clear_traps()
        return _bounded(p_from / p_to)


def receive_amount(amount: Number | None, swap_rate: Number | None) -> Decimal:
    value = as_decimal(amount)
    r = as_decimal(swap_rate)
    if not value.is_finite() or value <= 0 or not r.is_finite() or r <= 0:
        return ZERO
    with localcontext() as ctx:
        ctx.clear_traps()
        return _bounded(value * r)


def value_of(amount: Number | None, price: Number | None) -> Decimal:
    """Worth of `amount` units at `price`; 0 when either side is unusable."""
    value = as_decimal(amount)
    p = as_decimal(price)
    if not value.is_finite() or value <= 0 or not p.is_finite():
        return ZERO
    with localcontext() as ctx:
        ctx.clear_traps()
        return _bounded(value * p)


def quote(price_from: Number | None, price_to: Number | None, amount: Number | None) -> SwapQuote:
    swap_rate = rate(price_from, price_to)
    return SwapQuote(rate=swap_rate, receive_amount=receive_amount(amount, swap_rate))


def latest_quotes(quotes: Iterable[PriceQuote]) -> dict[str, PriceQuote]:
    """Keep the most recent quote per asset; on equal timestamps the later record wins."""
    latest: dict[str, PriceQuote] = {}
    for item in quotes:
        existing = latest.get(item.asset_symbol)
        if existing is None or item.as_of >= existing.as_of:
            latest[item.asset_symbol] = item
    return latest


def price_of(quotes: Mapping[str, PriceQuote], symbol: str | None) -> Decimal | None:
    if not symbol:
        return None
    found = quotes.get(symbol)
    return found.price if found is not None else None


__all__ = [
    "Number",
    "SwapQuote",
    "as_decimal",
    "latest_quotes",
    "price_of",
    "quote",
    "rate",
    "receive_amount",
    "value_of",
]
