from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from lvcheck.journal.trade_store import ExitOutcome, HistorySummary, TradeRecord
from lvcheck.risk.leverage_calculator import (
    CalculationInputs,
    CalculationResult,
    CalculationWarning,
    Direction,
    ExposureMode,
    RiskMode,
)


class CalculationRequest(BaseModel):
    # No range constraints here: the calculator reports bad values as warnings.
    entry_price: Optional[float] = None
    stop_price: Optional[float] = None
    take_profit: Optional[float] = None
    exposure_mode: ExposureMode = ExposureMode.MARGIN
    margin_capital: Optional[float] = None
    position_size: Optional[float] = None
    risk_mode: RiskMode = RiskMode.AMOUNT
    risk_value: Optional[float] = None

    def to_inputs(self) -> CalculationInputs:
        return CalculationInputs(
            entry_price=self.entry_price,
            stop_price=self.stop_price,
            take_profit=self.take_profit,
            exposure_mode=self.exposure_mode,
            margin_capital=self.margin_capital,
            position_size=self.position_size,
            risk_mode=self.risk_mode,
            risk_value=self.risk_value,
        )


class CalculationResponse(BaseModel):
    ready: bool
    direction: Optional[Direction] = None
    price_delta: Optional[float] = None
    price_delta_pct: Optional[float] = None
    theoretical_max_leverage: Optional[float] = None
    max_leverage: Optional[float] = None
    max_position_size: Optional[float] = None
    required_margin: Optional[float] = None
    allowed_loss: Optional[float] = None
    risk_percent_of_capital: Optional[float] = None
    loss_at_stop: Optional[float] = None
    risk_reward_ratio: Optional[float] = None
    expected_profit: Optional[float] = None
    expected_return_pct: Optional[float] = None
    warnings: List[CalculationWarning] = []
    messages: List[str] = []

    @classmethod
    def from_result(cls, result: CalculationResult, messages: List[str]) -> "CalculationResponse":
        return cls.model_validate({**vars(result), "warnings": list(result.warnings), "messages": messages})


class TradeCreateRequest(CalculationRequest):
    exchange: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    notes: Optional[str] = None
    exit_outcome: Optional[ExitOutcome] = None

    @field_validator("exchange", "symbol")
    @classmethod
    def strip_required(cls, value: str) -> str:
        clean = value.strip()
        if not clean:
            raise ValueError("must not be blank")
        return clean


class TradeUpdateRequest(BaseModel):
    notes: Optional[str] = None
    exit_outcome: Optional[ExitOutcome] = None


class TradeRecordResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    created_at: datetime
    exchange: str
    symbol: str
    direction: Direction
    entry_price: float
    stop_price: float
    take_profit: Optional[float] = None
    exposure_mode: ExposureMode
    risk_mode: RiskMode
    margin_capital: Optional[float] = None
    position_size: Optional[float] = None
    risk_value: Optional[float] = None
    price_delta: Optional[float] = None
    price_delta_pct: Optional[float] = None
    theoretical_max_leverage: Optional[float] = None
    max_leverage: Optional[float] = None
    max_position_size: Optional[float] = None
    allowed_loss: Optional[float] = None
    loss_at_stop: Optional[float] = None
    risk_percent_of_capital: Optional[float] = None
    risk_reward_ratio: Optional[float] = None
    expected_profit: Optional[float] = None
    expected_return_pct: Optional[float] = None
    exit_outcome: Optional[ExitOutcome] = None
    notes: Optional[str] = None

    @classmethod
    def from_record(cls, record: TradeRecord) -> "TradeRecordResponse":
        return cls.model_validate(record)


class HistoryPageResponse(BaseModel):
    items: List[TradeRecordResponse]
    page: int
    page_size: int
    total_count: int
    total_pages: int


class HistorySummaryResponse(BaseModel):
    model_config = {"from_attributes": True}

    total_trades: int
    win_count: int
    loss_count: int
    win_rate: float
    sum_expected_profit: float
    sum_allowed_loss: float
    sum_margin: float
    sum_position: float

    @classmethod
    def from_summary(cls, summary: HistorySummary) -> "HistorySummaryResponse":
        return cls.model_validate(summary)


class ExchangeResponse(BaseModel):
    id: str
    name: str
    symbols: List[str]
    price_lookup: bool


class PriceResponse(BaseModel):
    exchange: str
    symbol: str
    price: float
    as_of: str


class ErrorResponse(BaseModel):
    error: str
    detail: str
    context: Optional[dict] = None
