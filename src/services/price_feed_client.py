from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config import config

from .price_types import PriceQuote

logger = logging.getLogger(__name__)


class PriceFeedError(Exception):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class PriceFeedClient:
    """Client for the spot price snapshot endpoint (one JSON array, all assets)."""

    def __init__(
        self,
        *,
        url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        retry_attempts: int | None = None,
        retry_backoff_seconds: float | None = None,
    ) -> None:
        settings = config()
        self.url = url or settings.prices_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._session = session or requests.Session()

        retries = Retry(
            total=retry_attempts if retry_attempts is not None else settings.price_retry_attempts,
            backoff_factor=(
                retry_backoff_seconds if retry_backoff_seconds is not None else settings.price_retry_backoff_seconds
            ),
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def fetch_quotes(self) -> list[PriceQuote]:
        payload = self._request()
        quotes: list[PriceQuote] = []
        for entry in payload:
            parsed = self._parse_entry(entry)
            if parsed is not None:
                quotes.append(parsed)
        return quotes

    def _request(self) -> list[Any]:
        try:
            response = self._session.request("GET", self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            message, payload = self._extract_error(resp)
            raise PriceFeedError(message, status_code=status_code, payload=payload) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise PriceFeedError(str(exc) or "Request failed", status_code=status_code) from exc

        try:
            payload_raw = response.json()
        except ValueError as exc:
            raise PriceFeedError("Price feed returned invalid JSON", payload=response.text) from exc

        if not isinstance(payload_raw, list):
            raise PriceFeedError("Price feed returned unexpected payload type", payload=payload_raw)
        return payload_raw

    def _parse_entry(self, entry: Any) -> PriceQuote | None:
        if not isinstance(entry, dict):
            logger.warning("Skipping price entry with unexpected type: %r", entry)
            return None

        symbol = entry.get("currency")
        if not isinstance(symbol, str) or not symbol.strip():
            logger.warning("Skipping price entry without currency: %r", entry)
            return None

        as_of = self._to_datetime(entry.get("date"))
        if as_of is None:
            logger.warning("Skipping %s price entry with invalid date: %r", symbol, entry.get("date"))
            return None

        price = self._to_decimal(entry.get("price"))
        if price is None or not price.is_finite() or price <= 0:
            logger.warning("Skipping %s price entry with unusable price: %r", symbol, entry.get("price"))
            return None

        return PriceQuote(asset_symbol=symbol, as_of=as_of, price=price)

    @staticmethod
    def _to_datetime(value: Any) -> datetime | None:
        if not isinstance(value, str):
            return None
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @staticmethod
    def _to_decimal(value: Any) -> Decimal | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return None

    @staticmethod
    def _extract_error(response: Response | None) -> tuple[str, Any | None]:
        message = "Request failed"
        payload: Any | None = None
        if response is None:
            return message, payload

        try:
            payload = response.json()
            if isinstance(payload, dict) and payload.get("message"):
                message = str(payload["message"])
        except ValueError:
            payload = response.text
        return message, payload


__all__ = ["PriceFeedClient", "PriceFeedError"]
