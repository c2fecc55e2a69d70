from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, localcontext

from domain.pricing import Number, as_decimal

DEFAULT_DECIMALS = 6


def format_amount(value: Number | None, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render ``value`` with exactly ``decimals`` fractional digits, floored.

    Floors instead of rounding so a displayed receive amount never exceeds
    what the swap yields. Non-finite and non-positive values render as zero.
    """
    if decimals < 0:
        msg = "decimals must be >= 0"
        raise ValueError(msg)
    number = as_decimal(value)
    if not number.is_finite() or number <= 0:
        return f"{Decimal(0):.{decimals}f}"
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimals + 2)
        floored = number.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_FLOOR)
    return f"{floored:.{decimals}f}"


def format_decimal(value: Decimal) -> str:
    quantized = value.normalize()
    # Avoid scientific notation for integers.
    if quantized == quantized.to_integral():
        return f"{quantized:.0f}"
    return format(quantized, "f")


def format_currency(value: Number | None) -> str:
    number = as_decimal(value)
    if not number.is_finite() or number <= 0:
        return "0.00"
    cents = number.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{cents:.2f}"
