from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping
from urllib.parse import quote

from config import config
from services.price_types import PriceQuote


@dataclass(frozen=True)
class TokenMeta:
    symbol: str
    icon: str
    has_price: bool


def token_icon_url(symbol: str, *, base_url: str | None = None) -> str:
    base = (base_url or config().icon_base_url).rstrip("/")
    encoded = quote(symbol, safe="!'()*")
    return f"{base}/{encoded}.svg"


def display_symbol(symbol: str) -> str:
    return symbol.upper()


def token_list(quotes: Mapping[str, PriceQuote], *, base_url: str | None = None) -> list[TokenMeta]:
    tokens = []
    for symbol, item in quotes.items():
        has_price = item.price.is_finite()
        if not has_price:
            continue
        tokens.append(TokenMeta(symbol=symbol, icon=token_icon_url(symbol, base_url=base_url), has_price=has_price))
    return tokens


def search_tokens(tokens: Iterable[TokenMeta], query: str = "", *, exclude: str | None = None) -> list[TokenMeta]:
    needle = query.strip().lower()
    return [
        token
        for token in tokens
        if token.symbol != exclude and (not needle or needle in token.symbol.lower())
    ]


__all__ = ["TokenMeta", "display_symbol", "search_tokens", "token_icon_url", "token_list"]
