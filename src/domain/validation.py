from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field


class SwapValidationError(ValueError):
    field: str = ""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if field is not None:
            self.field = field


class MissingSelection(SwapValidationError):
    pass


class InvalidAmount(SwapValidationError):
    field = "amount"


def parse_amount(amount_text: str | None) -> Decimal:
    """Parse a user-typed amount, accepting only finite values greater than zero."""
    text = (amount_text or "").strip()
    if not text:
        raise InvalidAmount("Amount is required")
    if "_" in text:
        raise InvalidAmount("Amount must be a number")
    try:
        amount = Decimal(text)
    except InvalidOperation as exc:
        raise InvalidAmount("Amount must be a number") from exc
    # Amounts must fit a double.
    if not amount.is_finite() or not math.isfinite(float(amount)):
        raise InvalidAmount("Amount must be a number")
    if amount <= 0:
        raise InvalidAmount("Amount must be greater than 0")
    return amount


class SwapRequest(BaseModel):
    """Raw swap form input; checked by :func:`validate_swap` before use."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_asset: str = Field(default="", alias="fromToken")
    to_asset: str = Field(default="", alias="toToken")
    amount: str = ""

    def validate_amount(self) -> Decimal:
        return validate_swap(self.from_asset, self.to_asset, self.amount)


def validate_swap(from_asset: str | None, to_asset: str | None, amount_text: str | None) -> Decimal:
    if not from_asset:
        raise MissingSelection("Select a token", field="from_asset")
    if not to_asset:
        raise MissingSelection("Select a token", field="to_asset")
    return parse_amount(amount_text)


__all__ = [
    "InvalidAmount",
    "MissingSelection",
    "SwapRequest",
    "SwapValidationError",
    "parse_amount",
    "validate_swap",
]
