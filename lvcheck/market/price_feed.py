import math
from typing import Any, Optional

import requests

from lvcheck.core.config import Settings
from lvcheck.core.logging import get_logger

logger = get_logger(__name__)


class PriceFeedError(Exception):
    """Raised when a last-price lookup cannot produce a usable price."""


def _parse_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(str(value).strip())
    except ValueError:
        return None
    return price if math.isfinite(price) and price > 0 else None


class BinancePriceFeed:
    """Last traded price from the public Binance ticker endpoint."""

    def __init__(self, base_url: str, timeout: float = 5.0, session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "BinancePriceFeed":
        return cls(settings.price_api_url, timeout=settings.price_timeout_seconds)

    def fetch_price(self, symbol: str) -> float:
        clean = (symbol or "").strip().upper()
        if not clean:
            raise PriceFeedError("Symbol is required")
        try:
            resp = self.session.get(self.base_url, params={"symbol": clean}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PriceFeedError(f"Price request failed: {exc}") from exc
        if not resp.ok:
            raise PriceFeedError(f"Price request failed: HTTP {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise PriceFeedError("Price response was not valid JSON") from exc
        price = _parse_price(payload.get("price") if isinstance(payload, dict) else None)
        if price is None:
            logger.warning(
                "price_missing",
                extra={"event": "price_missing", "symbol": clean, "payload": payload},
            )
            raise PriceFeedError("No price returned")
        return price
