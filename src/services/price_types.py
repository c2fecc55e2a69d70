from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class PriceQuote:
    """Spot price of one asset unit in the feed's reference unit (USD)."""

    asset_symbol: str
    as_of: datetime
    price: Decimal


__all__ = ["PriceQuote"]
