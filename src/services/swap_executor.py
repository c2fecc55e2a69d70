from __future__ import annotations

import logging
import time
from typing import Callable

from domain.pricing import SwapQuote
from domain.validation import SwapRequest
from utils.formatting import format_amount

logger = logging.getLogger(__name__)


class SwapExecutor:
    """Stand-in for settlement: waits a fixed delay and reports the quoted swap."""

    def __init__(self, *, delay_seconds: float = 0.6, sleep: Callable[[float], None] = time.sleep) -> None:
        if delay_seconds < 0:
            msg = "delay_seconds must be >= 0"
            raise ValueError(msg)
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def execute(self, request: SwapRequest, swap_quote: SwapQuote) -> str:
        try:
            self._sleep(self.delay_seconds)
            message = (
                f"Swapping {request.amount} {request.from_asset} → "
                f"{format_amount(swap_quote.receive_amount)} {request.to_asset} "
                f"at rate {format_amount(swap_quote.rate)}"
            )
        except Exception as exc:
            logger.exception("Simulated swap failed")
            return f"Swap failed: {str(exc) or 'Unknown error during swap'}"
        logger.info(message)
        return message


__all__ = ["SwapExecutor"]
