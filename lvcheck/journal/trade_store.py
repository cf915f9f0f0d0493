import threading
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from lvcheck.risk.leverage_calculator import (
    CalculationInputs,
    CalculationResult,
    Direction,
    ExposureMode,
    RiskMode,
)


class ExitOutcome(str, Enum):
    TAKE_PROFIT = "take_profit"
    STOP_LOSS = "stop_loss"
    OPEN = "open"


class TradeNotFoundError(KeyError):
    """Raised when a trade id is not present in the store."""


@dataclass(frozen=True)
class TradeRecord:
    id: str
    created_at: datetime
    exchange: str
    symbol: str
    direction: Direction
    entry_price: float
    stop_price: float
    take_profit: Optional[float]
    exposure_mode: ExposureMode
    risk_mode: RiskMode
    margin_capital: Optional[float]
    position_size: Optional[float]
    risk_value: Optional[float]
    price_delta: Optional[float]
    price_delta_pct: Optional[float]
    theoretical_max_leverage: Optional[float]
    max_leverage: Optional[float]
    max_position_size: Optional[float]
    allowed_loss: Optional[float]
    loss_at_stop: Optional[float]
    risk_percent_of_capital: Optional[float]
    risk_reward_ratio: Optional[float]
    expected_profit: Optional[float]
    expected_return_pct: Optional[float]
    exit_outcome: Optional[ExitOutcome] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class HistoryFilters:
    symbol: str = ""
    exchange: str = ""
    direction: Optional[Direction] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None

    def matches(self, record: TradeRecord) -> bool:
        if self.symbol and self.symbol.lower() not in record.symbol.lower():
            return False
        if self.exchange and self.exchange.lower() not in record.exchange.lower():
            return False
        if self.direction is not None and record.direction != self.direction:
            return False
        created = record.created_at
        if self.from_date is not None and created < datetime.combine(self.from_date, time.min, timezone.utc):
            return False
        if self.to_date is not None and created > datetime.combine(self.to_date, time.max, timezone.utc):
            return False
        return True


@dataclass(frozen=True)
class HistorySummary:
    total_trades: int
    win_count: int
    loss_count: int
    win_rate: float
    sum_expected_profit: float
    sum_allowed_loss: float
    sum_margin: float
    sum_position: float


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    stripped = (notes or "").strip()
    return stripped or None


class TradeStore:
    """In-process journal of saved calculations, newest first."""

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._records: Dict[str, TradeRecord] = {}

    def save(
        self,
        *,
        exchange: str,
        symbol: str,
        inputs: CalculationInputs,
        result: CalculationResult,
        notes: Optional[str] = None,
        exit_outcome: Optional[ExitOutcome] = None,
    ) -> TradeRecord:
        if not result.ready:
            raise ValueError("Calculation is not ready; fix the inputs before saving.")
        record = TradeRecord(
            id=self._id_factory(),
            created_at=self._clock(),
            exchange=exchange.strip(),
            symbol=symbol.strip().upper(),
            direction=result.direction,
            entry_price=inputs.entry_price,
            stop_price=inputs.stop_price,
            take_profit=inputs.take_profit,
            exposure_mode=ExposureMode(inputs.exposure_mode),
            risk_mode=RiskMode(inputs.risk_mode),
            margin_capital=inputs.margin_capital,
            position_size=inputs.position_size,
            risk_value=inputs.risk_value,
            price_delta=result.price_delta,
            price_delta_pct=result.price_delta_pct,
            theoretical_max_leverage=result.theoretical_max_leverage,
            max_leverage=result.max_leverage,
            max_position_size=result.max_position_size,
            allowed_loss=result.allowed_loss,
            loss_at_stop=result.loss_at_stop,
            risk_percent_of_capital=result.risk_percent_of_capital,
            risk_reward_ratio=result.risk_reward_ratio,
            expected_profit=result.expected_profit,
            expected_return_pct=result.expected_return_pct,
            exit_outcome=exit_outcome,
            notes=_clean_notes(notes),
        )
        with self._lock:
            self._records[record.id] = record
        return record

    def get(self, trade_id: str) -> TradeRecord:
        with self._lock:
            record = self._records.get(trade_id)
        if record is None:
            raise TradeNotFoundError(trade_id)
        return record

    def all(self, filters: Optional[HistoryFilters] = None) -> List[TradeRecord]:
        active = filters or HistoryFilters()
        with self._lock:
            matched = [r for r in self._records.values() if active.matches(r)]
        return sorted(matched, key=lambda r: r.created_at, reverse=True)

    def query(
        self,
        filters: Optional[HistoryFilters] = None,
        *,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[TradeRecord], int]:
        """Return one page of matching records plus the total match count."""
        matched = self.all(filters)
        start = (max(page, 1) - 1) * page_size
        return matched[start:start + page_size], len(matched)

    def summary(self, filters: Optional[HistoryFilters] = None) -> HistorySummary:
        matched = self.all(filters)
        total = len(matched)
        wins = sum(1 for r in matched if r.exit_outcome == ExitOutcome.TAKE_PROFIT)
        losses = sum(1 for r in matched if r.exit_outcome == ExitOutcome.STOP_LOSS)
        return HistorySummary(
            total_trades=total,
            win_count=wins,
            loss_count=losses,
            win_rate=(wins / total * 100) if total else 0.0,
            sum_expected_profit=sum(r.expected_profit or 0.0 for r in matched),
            sum_allowed_loss=sum(r.allowed_loss or 0.0 for r in matched),
            sum_margin=sum(r.margin_capital or 0.0 for r in matched),
            sum_position=sum(r.max_position_size or 0.0 for r in matched),
        )

    def update(
        self,
        trade_id: str,
        *,
        notes: Optional[str] = None,
        exit_outcome: Optional[ExitOutcome] = None,
    ) -> TradeRecord:
        """Replace the editable fields of a record; blank notes clear them."""
        with self._lock:
            current = self._records.get(trade_id)
            if current is None:
                raise TradeNotFoundError(trade_id)
            updated = replace(current, notes=_clean_notes(notes), exit_outcome=exit_outcome)
            self._records[trade_id] = updated
        return updated

    def delete(self, trade_id: str) -> None:
        with self._lock:
            if self._records.pop(trade_id, None) is None:
                raise TradeNotFoundError(trade_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
