from __future__ import annotations

from decimal import Decimal

import pytest

from domain.validation import InvalidAmount, MissingSelection, SwapRequest, SwapValidationError, validate_swap


def test_valid_request_returns_parsed_amount() -> None:
    assert validate_swap("ETH", "USDC", "1.5") == Decimal("1.5")


@pytest.mark.parametrize("text", [" 2 ", "1e3", "0.000001"])
def test_accepts_numeric_text(text: str) -> None:
    assert validate_swap("ETH", "USDC", text) > 0


@pytest.mark.parametrize(("from_asset", "to_asset"), [("", "USDC"), ("ETH", ""), ("", ""), (None, "USDC")])
def test_missing_selection(from_asset: str | None, to_asset: str) -> None:
    with pytest.raises(MissingSelection) as exc_info:
        validate_swap(from_asset, to_asset, "1")

    assert exc_info.value.message == "Select a token"
    assert isinstance(exc_info.value, ValueError)


def test_missing_selection_is_reported_before_amount() -> None:
    with pytest.raises(MissingSelection):
        validate_swap("", "USDC", "")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("", "Amount is required"),
        ("   ", "Amount is required"),
        (None, "Amount is required"),
        ("abc", "Amount must be a number"),
        ("1,5", "Amount must be a number"),
        ("NaN", "Amount must be a number"),
        ("Infinity", "Amount must be a number"),
        ("1e400", "Amount must be a number"),
        ("1e999999", "Amount must be a number"),
        ("1_000", "Amount must be a number"),
        ("0", "Amount must be greater than 0"),
        ("-5", "Amount must be greater than 0"),
    ],
)
def test_invalid_amount(text: str | None, message: str) -> None:
    with pytest.raises(InvalidAmount) as exc_info:
        validate_swap("ETH", "USDC", text)

    assert exc_info.value.message == message
    assert exc_info.value.field == "amount"


def test_swap_request_accepts_form_field_names() -> None:
    request = SwapRequest.model_validate({"fromToken": "ETH", "toToken": "USDC", "amount": "2"})

    assert request.from_asset == "ETH"
    assert request.to_asset == "USDC"
    assert request.validate_amount() == Decimal("2")


def test_swap_request_defaults_are_invalid() -> None:
    with pytest.raises(SwapValidationError):
        SwapRequest().validate_amount()
