from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from services.price_cache import PriceLookup
from utils.formatting import format_amount

from .pricing import ZERO, SwapQuote, quote, value_of
from .validation import SwapRequest, SwapValidationError


class SwapHandler(Protocol):
    def execute(self, request: SwapRequest, swap_quote: SwapQuote) -> str: ...


@dataclass(frozen=True)
class SwapFormState:
    amount: Decimal
    rate: Decimal
    receive_amount: Decimal
    validation_error: SwapValidationError | None
    feed_error: str | None
    is_loading: bool
    from_value: Decimal
    to_value: Decimal

    @property
    def can_confirm(self) -> bool:
        return (
            self.validation_error is None
            and self.feed_error is None
            and not self.is_loading
            and self.rate > 0
            and self.receive_amount > 0
        )

    @property
    def quote(self) -> SwapQuote:
        return SwapQuote(rate=self.rate, receive_amount=self.receive_amount)


class SwapForm:
    """Swap form whose quote and validity are recomputed on every input change.

    Mirrors a reactive form: selecting a token, typing an amount or receiving
    a new price snapshot re-runs validation and quote derivation right away,
    so :attr:`state` is always consistent with the current inputs.
    """

    def __init__(self, executor: SwapHandler, prices: PriceLookup | None = None) -> None:
        self._executor = executor
        self.from_asset = ""
        self.to_asset = ""
        self.amount_text = ""
        self.prices = prices or PriceLookup()
        self._state = self._evaluate()

    @property
    def state(self) -> SwapFormState:
        return self._state

    @property
    def request(self) -> SwapRequest:
        return SwapRequest(from_asset=self.from_asset, to_asset=self.to_asset, amount=self.amount_text)

    def select_from(self, symbol: str) -> SwapFormState:
        self.from_asset = symbol
        return self._changed()

    def select_to(self, symbol: str) -> SwapFormState:
        self.to_asset = symbol
        return self._changed()

    def set_amount(self, amount_text: str) -> SwapFormState:
        self.amount_text = amount_text
        return self._changed()

    def update_prices(self, prices: PriceLookup) -> SwapFormState:
        self.prices = prices
        return self._changed()

    def flip(self) -> SwapFormState:
        if self.from_asset and self.to_asset:
            self.from_asset, self.to_asset = self.to_asset, self.from_asset
        return self._changed()

    def rate_label(self) -> str | None:
        state = self._state
        if state.feed_error or not self.from_asset or not self.to_asset or state.rate <= 0:
            return None
        return f"1 {self.from_asset} = {format_amount(state.rate)} {self.to_asset}"

    def confirm(self) -> str | None:
        """Run the swap, or do nothing when the current inputs cannot be confirmed."""
        if not self._state.can_confirm:
            return None
        return self._executor.execute(self.request, self._state.quote)

    def _changed(self) -> SwapFormState:
        self._state = self._evaluate()
        return self._state

    def _evaluate(self) -> SwapFormState:
        return evaluate(self.request, self.prices)


def evaluate(request: SwapRequest, prices: PriceLookup) -> SwapFormState:
    validation_error: SwapValidationError | None = None
    amount = ZERO
    try:
        amount = request.validate_amount()
    except SwapValidationError as exc:
        validation_error = exc

    price_from = prices.price_of(request.from_asset)
    price_to = prices.price_of(request.to_asset)
    swap_quote = quote(price_from, price_to, amount)

    from_value = value_of(amount, price_from)
    to_value = value_of(swap_quote.receive_amount, price_to)
    return SwapFormState(
        amount=amount,
        rate=swap_quote.rate,
        receive_amount=swap_quote.receive_amount,
        validation_error=validation_error,
        feed_error=prices.error,
        is_loading=not prices.is_loaded and prices.error is None,
        from_value=from_value,
        to_value=to_value,
    )


__all__ = ["SwapForm", "SwapFormState", "SwapHandler", "evaluate"]
