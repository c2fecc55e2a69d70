from __future__ import annotations

import argparse
import logging
from typing import Sequence

from config import config
from domain.swap_form import SwapForm
from domain.tokens import display_symbol
from services.price_cache import build_default_cache
from services.swap_executor import SwapExecutor
from utils.formatting import format_amount, format_currency, format_decimal
from utils.sums import sum_to_n_a, sum_to_n_b, sum_to_n_c


def run_quote(from_asset: str, to_asset: str, amount: str, *, confirm: bool) -> int:
    cache = build_default_cache()
    form = SwapForm(SwapExecutor(delay_seconds=config().swap_delay_seconds), prices=cache.lookup())
    form.select_from(from_asset)
    form.select_to(to_asset)
    state = form.set_amount(amount)

    if state.feed_error:
        print(f"Failed to fetch prices: {state.feed_error}")
    for symbol in (from_asset, to_asset):
        price = form.prices.price_of(symbol)
        price_text = format_decimal(price) if price is not None else "unavailable"
        print(f"  {display_symbol(symbol):<10} {price_text}")

    label = form.rate_label()
    print(f"Rate:    {label or 'Select tokens to see exchange rate'}")
    print(f"Pay:     {amount} {from_asset} (${format_currency(state.from_value)})")
    print(f"Receive: {format_amount(state.receive_amount)} {to_asset} (${format_currency(state.to_value)})")

    if state.validation_error is not None:
        print(f"Invalid input: {state.validation_error.message}")
    if not confirm:
        return 0 if state.can_confirm else 1

    message = form.confirm()
    if message is None:
        print("Swap cannot be confirmed with the current inputs.")
        return 1
    print(message)
    return 0


def run_sum_to_n(n: int) -> int:
    print(f"sum_to_n_a({n}) = {sum_to_n_a(n)}")
    print(f"sum_to_n_b({n}) = {sum_to_n_b(n)}")
    print(f"sum_to_n_c({n}) = {sum_to_n_c(n)}")
    return 0


def run_server(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("api.api:app", host=host, port=port)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=config().log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    parser = argparse.ArgumentParser(description="Token swap quotes, product API and small exercises.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)

    quote = subparsers.add_parser("quote", help="Quote a token swap from the live price feed.")
    quote.add_argument("--from", dest="from_asset", required=True)
    quote.add_argument("--to", dest="to_asset", required=True)
    quote.add_argument("--amount", required=True)
    quote.add_argument("--confirm", action="store_true", help="Run the simulated swap after quoting.")

    sums = subparsers.add_parser("sum-to-n", help="Sum the integers 1..n three ways.")
    sums.add_argument("n", type=int)

    args = parser.parse_args(argv)
    if args.command == "serve":
        return run_server(args.host, args.port)
    if args.command == "quote":
        return run_quote(args.from_asset, args.to_asset, args.amount, confirm=args.confirm)
    return run_sum_to_n(args.n)


if __name__ == "__main__":
    raise SystemExit(main())
