from __future__ import annotations

from domain.pricing import latest_quotes
from domain.tokens import TokenMeta, display_symbol, search_tokens, token_icon_url, token_list
from tests.helpers.price_feed import make_quote

ICON_BASE = "https://icons.example/tokens"


def test_token_icon_url_encodes_symbol() -> None:
    assert token_icon_url("ETH", base_url=ICON_BASE) == "https://icons.example/tokens/ETH.svg"
    assert token_icon_url("st/ATOM", base_url=ICON_BASE + "/") == "https://icons.example/tokens/st%2FATOM.svg"


def test_display_symbol_upper_cases() -> None:
    assert display_symbol("bNEO") == "BNEO"


def test_token_list_keeps_feed_order() -> None:
    quotes = latest_quotes([make_quote("ETH", "2000"), make_quote("USDC", "1"), make_quote("ATOM", "7")])

    tokens = token_list(quotes, base_url=ICON_BASE)

    assert [token.symbol for token in tokens] == ["ETH", "USDC", "ATOM"]
    assert all(token.has_price for token in tokens)
    assert tokens[0].icon == "https://icons.example/tokens/ETH.svg"


def test_search_tokens_filters_and_excludes() -> None:
    tokens = [
        TokenMeta(symbol="ETH", icon="", has_price=True),
        TokenMeta(symbol="wstETH", icon="", has_price=True),
        TokenMeta(symbol="USDC", icon="", has_price=True),
    ]

    assert [t.symbol for t in search_tokens(tokens, "eth")] == ["ETH", "wstETH"]
    assert [t.symbol for t in search_tokens(tokens, " ETH ", exclude="ETH")] == ["wstETH"]
    assert [t.symbol for t in search_tokens(tokens, exclude="USDC")] == ["ETH", "wstETH"]
