import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ExposureMode(str, Enum):
    MARGIN = "margin"
    POSITION = "position"


class RiskMode(str, Enum):
    AMOUNT = "amount"
    PERCENT = "percent"


class Direction(str, Enum):
    LONG = "Long"
    SHORT = "Short"


class CalculationWarning(str, Enum):
    """Closed set of conditions the calculator can report."""

    STOP_EQUALS_ENTRY = "stopEqualsEntry"
    INVALID_STOP = "invalidStop"
    PERCENT_POSITION = "percentPosition"
    INVALID_MARGIN = "invalidMargin"
    INVALID_LOSS = "invalidLoss"
    INVALID_POSITION = "invalidPosition"
    POSITION_TOO_LARGE = "positionTooLarge"
    TAKE_PROFIT = "takeProfit"


@dataclass(frozen=True)
class CalculationInputs:
    entry_price: Optional[float] = None
    stop_price: Optional[float] = None
    take_profit: Optional[float] = None
    exposure_mode: ExposureMode = ExposureMode.MARGIN
    margin_capital: Optional[float] = None
    position_size: Optional[float] = None
    risk_mode: RiskMode = RiskMode.AMOUNT
    risk_value: Optional[float] = None


@dataclass
class CalculationResult:
    ready: bool = False
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
    warnings: List[CalculationWarning] = field(default_factory=list)


def _as_float(value: Optional[float]) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except OverflowError:
        # Integers beyond float range behave like an infinite price.
        return math.copysign(math.inf, value)


def _is_finite_positive(value: Optional[float]) -> bool:
    number = _as_float(value)
    return number is not None and math.isfinite(number) and number > 0


def _is_blank(value: Optional[float]) -> bool:
    return value is None or value == 0 or (isinstance(value, float) and math.isnan(value))


def _to_ratio(value: Optional[float], total: Optional[float]) -> Optional[float]:
    if _is_blank(value) or _is_blank(total):
        return None
    return value / total * 100


def _resolve_allowed_loss(inputs: CalculationInputs, warnings: List[CalculationWarning]) -> Optional[float]:
    if inputs.risk_mode == RiskMode.AMOUNT:
        return float(inputs.risk_value) if _is_finite_positive(inputs.risk_value) else None
    if inputs.exposure_mode != ExposureMode.MARGIN:
        # Percent of capital has no base without a margin figure.
        warnings.append(CalculationWarning.PERCENT_POSITION)
        return None
    if _is_finite_positive(inputs.margin_capital) and _is_finite_positive(inputs.risk_value):
        return float(inputs.margin_capital) * float(inputs.risk_value) / 100
    return None


def _apply_take_profit(
    result: CalculationResult,
    take_profit: Optional[float],
    entry: float,
    base_notional: Optional[float],
    base_capital: Optional[float],
) -> None:
    """Project profit at the take-profit level against the given notional and capital."""
    take_profit = _as_float(take_profit)
    if not _is_finite_positive(base_notional) or _is_blank(take_profit):
        return

    if result.direction == Direction.LONG:
        profit_delta = take_profit - entry
    else:
        profit_delta = entry - take_profit

    if not math.isfinite(profit_delta) or profit_delta <= 0:
        result.warnings.append(CalculationWarning.TAKE_PROFIT)
        return

    expected_profit = profit_delta / entry * base_notional
    result.expected_profit = expected_profit
    result.expected_return_pct = _to_ratio(expected_profit, base_capital)
    result.risk_reward_ratio = profit_delta / result.price_delta


def calculate_metrics(inputs: CalculationInputs) -> CalculationResult:
    """
    Derive leverage, risk and reward figures for a single trade idea.

    Never raises. Missing or inconsistent inputs produce ``ready=False`` along with
    whatever partial figures could be computed and the matching warning codes.
    """
    entry = inputs.entry_price
    stop = inputs.stop_price

    if not _is_finite_positive(entry) or not _is_finite_positive(stop):
        return CalculationResult()

    entry = float(entry)
    stop = float(stop)
    if entry == stop:
        return CalculationResult(warnings=[CalculationWarning.STOP_EQUALS_ENTRY])

    direction = Direction.LONG if stop < entry else Direction.SHORT
    price_delta = abs(entry - stop)
    price_delta_pct = price_delta / entry * 100

    if price_delta == 0:
        return CalculationResult(warnings=[CalculationWarning.INVALID_STOP])

    warnings: List[CalculationWarning] = []
    allowed_loss = _resolve_allowed_loss(inputs, warnings)

    result = CalculationResult(
        direction=direction,
        price_delta=price_delta,
        price_delta_pct=price_delta_pct,
        theoretical_max_leverage=entry / price_delta,
        warnings=warnings,
    )

    if inputs.exposure_mode == ExposureMode.MARGIN:
        margin = inputs.margin_capital
        if not _is_finite_positive(margin):
            if not warnings:
                warnings.append(CalculationWarning.INVALID_MARGIN)
            return result
        if not _is_finite_positive(allowed_loss):
            warnings.append(CalculationWarning.INVALID_LOSS)
            return result

        margin = float(margin)
        capital_at_stop = margin * price_delta
        if not _is_finite_positive(capital_at_stop):
            # Margin times stop distance fell outside float range.
            warnings.append(CalculationWarning.INVALID_MARGIN)
            return result

        max_leverage = (allowed_loss * entry) / capital_at_stop
        max_position_size = margin * max_leverage

        result.max_leverage = max_leverage
        result.max_position_size = max_position_size
        result.allowed_loss = allowed_loss
        result.risk_percent_of_capital = _to_ratio(allowed_loss, margin)
        result.loss_at_stop = (price_delta / entry) * max_position_size
        result.required_margin = margin
        result.ready = math.isfinite(max_leverage) and max_leverage > 0

        _apply_take_profit(result, inputs.take_profit, entry, max_position_size, margin)
        return result

    position_size = inputs.position_size
    if not _is_finite_positive(position_size):
        warnings.append(CalculationWarning.INVALID_POSITION)
        return result
    if not _is_finite_positive(allowed_loss):
        warnings.append(CalculationWarning.INVALID_LOSS)
        return result

    position_size = float(position_size)
    loss_at_stop = (price_delta / entry) * position_size
    result.loss_at_stop = loss_at_stop

    if allowed_loss < loss_at_stop:
        warnings.append(CalculationWarning.POSITION_TOO_LARGE)

    # In position mode the ceiling depends on stop distance only.
    max_leverage = entry / price_delta
    required_margin = loss_at_stop

    result.max_leverage = max_leverage
    result.allowed_loss = allowed_loss
    result.required_margin = required_margin
    result.max_position_size = (allowed_loss * entry) / price_delta
    result.risk_percent_of_capital = _to_ratio(allowed_loss, required_margin)
    result.ready = allowed_loss >= loss_at_stop and math.isfinite(max_leverage)

    _apply_take_profit(result, inputs.take_profit, entry, position_size, required_margin)
    return result
