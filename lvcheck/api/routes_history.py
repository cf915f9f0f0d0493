import math
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from lvcheck.api.errors import error_response
from lvcheck.core.config import get_settings
from lvcheck.core.logging import get_logger
from lvcheck.journal.csv_export import trades_to_csv
from lvcheck.journal.trade_store import HistoryFilters, TradeNotFoundError, TradeStore
from lvcheck.risk.leverage_calculator import Direction, calculate_metrics
from lvcheck.trading.schemas import (
    ErrorResponse,
    HistoryPageResponse,
    HistorySummaryResponse,
    TradeCreateRequest,
    TradeRecordResponse,
    TradeUpdateRequest,
)

router = APIRouter(prefix="/api/history", tags=["history"])

_store: TradeStore | None = None
logger = get_logger(__name__)


def configure_trade_store(store: TradeStore) -> None:
    global _store
    _store = store


def get_trade_store() -> TradeStore:
    if _store is None:
        raise HTTPException(status_code=500, detail="Trade store not configured")
    return _store


def _trade_not_found(trade_id: str):
    return error_response(
        status_code=404,
        code="trade_not_found",
        detail="Trade not found.",
        context={"trade_id": trade_id},
    )


def _parse_date(value: Optional[str]) -> Optional[date]:
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def _parse_page(value: Optional[str]) -> int:
    try:
        page = int((value or "1").strip())
    except ValueError:
        return 1
    return page if page > 0 else 1


def history_filters(
    symbol: Optional[str] = Query(None),
    exchange: Optional[str] = Query(None),
    direction: Optional[str] = Query(None),
    from_date: Optional[str] = Query(None),
    to_date: Optional[str] = Query(None),
) -> HistoryFilters:
    """Build filters from query params, silently dropping values that do not parse."""
    clean_direction = (direction or "").strip()
    return HistoryFilters(
        symbol=(symbol or "").strip(),
        exchange=(exchange or "").strip(),
        direction=Direction(clean_direction) if clean_direction in {d.value for d in Direction} else None,
        from_date=_parse_date(from_date),
        to_date=_parse_date(to_date),
    )


@router.get("", response_model=HistoryPageResponse)
async def list_trades(
    page: Optional[str] = Query(None),
    filters: HistoryFilters = Depends(history_filters),
    store: TradeStore = Depends(get_trade_store),
) -> HistoryPageResponse:
    """Return one page of saved trades, newest first."""
    page_size = get_settings().history_page_size
    current = _parse_page(page)
    records, total = store.query(filters, page=current, page_size=page_size)
    return HistoryPageResponse(
        items=[TradeRecordResponse.from_record(r) for r in records],
        page=current,
        page_size=page_size,
        total_count=total,
        total_pages=max(1, math.ceil(total / page_size)),
    )


@router.get("/summary", response_model=HistorySummaryResponse)
async def history_summary(
    filters: HistoryFilters = Depends(history_filters),
    store: TradeStore = Depends(get_trade_store),
) -> HistorySummaryResponse:
    return HistorySummaryResponse.from_summary(store.summary(filters))


@router.get("/export", response_class=Response)
async def export_trades(
    filters: HistoryFilters = Depends(history_filters),
    store: TradeStore = Depends(get_trade_store),
) -> Response:
    """Download every matching trade as CSV."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return Response(
        content=trades_to_csv(store.all(filters)),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="lvcheck-trades-{stamp}.csv"'},
    )


@router.post(
    "",
    status_code=201,
    response_model=TradeRecordResponse,
    responses={400: {"model": ErrorResponse}},
)
async def save_trade(request: TradeCreateRequest, store: TradeStore = Depends(get_trade_store)):
    """Recompute the request server-side and journal it when it yields a usable leverage."""
    inputs = request.to_inputs()
    result = calculate_metrics(inputs)
    try:
        record = store.save(
            exchange=request.exchange,
            symbol=request.symbol,
            inputs=inputs,
            result=result,
            notes=request.notes,
            exit_outcome=request.exit_outcome,
        )
    except ValueError as exc:
        logger.warning(
            "trade_save_rejected",
            extra={
                "event": "trade_save_rejected",
                "symbol": request.symbol,
                "warnings": [w.value for w in result.warnings],
            },
        )
        return error_response(
            status_code=400,
            code="validation_error",
            detail=str(exc),
            context={"warnings": [w.value for w in result.warnings]},
        )
    logger.info(
        "trade_saved",
        extra={"event": "trade_saved", "trade_id": record.id, "symbol": record.symbol, "exchange": record.exchange},
    )
    return TradeRecordResponse.from_record(record)


@router.get("/{trade_id}", response_model=TradeRecordResponse, responses={404: {"model": ErrorResponse}})
async def get_trade(trade_id: str, store: TradeStore = Depends(get_trade_store)):
    try:
        return TradeRecordResponse.from_record(store.get(trade_id))
    except TradeNotFoundError:
        return _trade_not_found(trade_id)


@router.patch("/{trade_id}", response_model=TradeRecordResponse, responses={404: {"model": ErrorResponse}})
async def update_trade(trade_id: str, request: TradeUpdateRequest, store: TradeStore = Depends(get_trade_store)):
    """Replace notes and exit outcome for a saved trade."""
    try:
        record = store.update(trade_id, notes=request.notes, exit_outcome=request.exit_outcome)
    except TradeNotFoundError:
        return _trade_not_found(trade_id)
    logger.info("trade_updated", extra={"event": "trade_updated", "trade_id": trade_id})
    return TradeRecordResponse.from_record(record)


@router.delete("/{trade_id}", responses={404: {"model": ErrorResponse}})
async def delete_trade(trade_id: str, store: TradeStore = Depends(get_trade_store)) -> dict:
    try:
        store.delete(trade_id)
    except TradeNotFoundError:
        return _trade_not_found(trade_id)
    logger.info("trade_deleted", extra={"event": "trade_deleted", "trade_id": trade_id})
    return {"deleted": True, "trade_id": trade_id}
