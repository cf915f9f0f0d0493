import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query

from lvcheck.api.errors import error_response
from lvcheck.core.logging import get_logger
from lvcheck.market.catalog import EXCHANGES, find_exchange
from lvcheck.market.price_feed import BinancePriceFeed, PriceFeedError
from lvcheck.trading.schemas import ErrorResponse, ExchangeResponse, PriceResponse

router = APIRouter(prefix="/api/market", tags=["market"])

_price_feed: BinancePriceFeed | None = None
logger = get_logger(__name__)


def configure_price_feed(feed: BinancePriceFeed) -> None:
    global _price_feed
    _price_feed = feed


def get_price_feed() -> BinancePriceFeed:
    if _price_feed is None:
        raise HTTPException(status_code=500, detail="Price feed not configured")
    return _price_feed


@router.get("/exchanges", response_model=list[ExchangeResponse])
async def list_exchanges() -> list[ExchangeResponse]:
    """Return the exchange/symbol catalog for dropdowns."""
    return [
        ExchangeResponse(id=ex.id, name=ex.name, symbols=list(ex.symbols), price_lookup=ex.price_lookup)
        for ex in EXCHANGES
    ]


@router.get(
    "/price",
    response_model=PriceResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def last_price(
    symbol: str = Query(...),
    exchange: str = Query("binance"),
    feed: BinancePriceFeed = Depends(get_price_feed),
):
    symbol_clean = (symbol or "").strip().upper()
    if not symbol_clean:
        return error_response(status_code=400, code="validation_error", detail="Symbol is required")
    venue = find_exchange(exchange)
    if venue is None or not venue.price_lookup:
        return error_response(
            status_code=400,
            code="unsupported_exchange",
            detail="Current price lookup is only available for Binance.",
            context={"exchange": exchange},
        )
    try:
        price = await asyncio.to_thread(feed.fetch_price, symbol_clean)
    except PriceFeedError as exc:
        logger.warning(
            "price_fetch_failed",
            extra={"event": "price_fetch_failed", "symbol": symbol_clean, "error": str(exc)},
        )
        return error_response(
            status_code=503,
            code="price_unavailable",
            detail="Unable to load the current price. Please retry shortly.",
            context={"symbol": symbol_clean, "exchange": venue.id},
        )
    return PriceResponse(
        exchange=venue.id,
        symbol=symbol_clean,
        price=price,
        as_of=datetime.now(timezone.utc).isoformat(),
    )
