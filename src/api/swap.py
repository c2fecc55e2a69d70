from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from starlette import status

from api.dependencies import get_prices, get_swap_executor
from domain.swap_form import SwapFormState, evaluate
from domain.tokens import search_tokens, token_list
from domain.validation import SwapRequest
from services.price_cache import PriceLookup
from services.swap_executor import SwapExecutor
from utils.formatting import format_amount

router = APIRouter(prefix="/api", tags=["swap"])

Prices = Annotated[PriceLookup, Depends(get_prices)]


def _blocking_reason(state: SwapFormState) -> str:
    if state.validation_error is not None:
        return state.validation_error.message
    if state.feed_error is not None:
        return "Failed to fetch prices"
    if state.is_loading:
        return "Prices are still loading"
    return "Price unavailable for the selected tokens"


@router.get("/prices")
def get_prices_snapshot(prices: Prices) -> dict[str, Any]:
    return {
        "data": {
            symbol: {"price": float(item.price), "date": item.as_of.isoformat()}
            for symbol, item in prices.quotes.items()
        },
        "error": prices.error,
    }


@router.get("/tokens")
def get_tokens(
    prices: Prices,
    query: Annotated[str, Query()] = "",
    exclude: Annotated[str | None, Query()] = None,
) -> dict[str, Any]:
    tokens = search_tokens(token_list(prices.quotes), query, exclude=exclude)
    return {
        "data": [{"symbol": token.symbol, "icon": token.icon, "hasPrice": token.has_price} for token in tokens],
        "error": prices.error,
    }


@router.post("/swap/quote")
def get_swap_quote(request: SwapRequest, prices: Prices) -> dict[str, Any]:
    state = evaluate(request, prices)
    return {
        "rate": float(state.rate),
        "receiveAmount": float(state.receive_amount),
        "formattedRate": format_amount(state.rate),
        "formattedReceive": format_amount(state.receive_amount),
        "fromValue": float(state.from_value),
        "toValue": float(state.to_value),
        "canConfirm": state.can_confirm,
        "error": None if state.can_confirm else _blocking_reason(state),
    }


@router.post("/swap/confirm", response_model=None)
def confirm_swap(
    request: SwapRequest,
    prices: Prices,
    executor: Annotated[SwapExecutor, Depends(get_swap_executor)],
) -> dict[str, Any] | JSONResponse:
    state = evaluate(request, prices)
    if not state.can_confirm:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": _blocking_reason(state)})
    return {"message": executor.execute(request, state.quote)}
