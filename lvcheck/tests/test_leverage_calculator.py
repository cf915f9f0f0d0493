import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lvcheck.risk.leverage_calculator import (  # noqa: E402
    CalculationInputs,
    CalculationResult,
    CalculationWarning,
    Direction,
    ExposureMode,
    RiskMode,
    calculate_metrics,
)


def margin_inputs(**overrides):
    params = {
        "entry_price": 63250,
        "stop_price": 61800,
        "exposure_mode": ExposureMode.MARGIN,
        "margin_capital": 5000,
        "risk_mode": RiskMode.AMOUNT,
        "risk_value": 300,
    }
    params.update(overrides)
    return CalculationInputs(**params)


def position_inputs(**overrides):
    params = {
        "entry_price": 100,
        "stop_price": 95,
        "exposure_mode": ExposureMode.POSITION,
        "position_size": 2000,
        "risk_mode": RiskMode.AMOUNT,
        "risk_value": 150,
    }
    params.update(overrides)
    return CalculationInputs(**params)


def test_margin_long_reference_trade():
    result = calculate_metrics(margin_inputs())
    assert isinstance(result, CalculationResult)
    assert result.ready is True
    assert result.direction == Direction.LONG
    assert result.price_delta == 1450
    assert math.isclose(result.max_leverage, (300 * 63250) / (5000 * 1450))
    assert math.isclose(result.max_leverage, 2.6172, rel_tol=1e-4)
    assert math.isclose(result.max_position_size, 13086.2, rel_tol=1e-5)
    assert math.isclose(result.theoretical_max_leverage, 63250 / 1450)
    assert math.isclose(result.price_delta_pct, 1450 / 63250 * 100)
    assert result.allowed_loss == 300
    assert result.required_margin == 5000
    assert math.isclose(result.risk_percent_of_capital, 6.0)
    assert math.isclose(result.loss_at_stop, 300.0)
    assert result.warnings == []


def test_margin_mode_position_and_loss_identities():
    for entry, stop, margin, risk in [(63250, 61800, 5000, 300), (95, 100, 1000, 12.5), (2.5, 2.41, 750, 40)]:
        result = calculate_metrics(margin_inputs(entry_price=entry, stop_price=stop, margin_capital=margin, risk_value=risk))
        assert result.ready is True
        assert result.max_position_size == margin * result.max_leverage
        assert result.loss_at_stop == result.price_delta / entry * result.max_position_size


def test_margin_mode_percent_risk_uses_capital():
    result = calculate_metrics(margin_inputs(risk_mode=RiskMode.PERCENT, risk_value=2))
    assert result.ready is True
    assert result.allowed_loss == 100
    assert math.isclose(result.risk_percent_of_capital, 2.0)
    assert math.isclose(result.loss_at_stop, 100.0)


def test_short_direction_when_stop_above_entry():
    result = calculate_metrics(margin_inputs(entry_price=95, stop_price=100, margin_capital=1000, risk_value=50))
    assert result.direction == Direction.SHORT
    assert result.price_delta == 5
    assert math.isclose(result.max_leverage, (50 * 95) / (1000 * 5))


def test_direction_law():
    for entry, stop in [(100, 99), (100, 101), (0.5, 0.25), (0.25, 0.5), (63250, 70000)]:
        result = calculate_metrics(margin_inputs(entry_price=entry, stop_price=stop))
        assert (result.direction == Direction.LONG) == (stop < entry)


def test_stop_equals_entry_rejected():
    result = calculate_metrics(margin_inputs(entry_price=100, stop_price=100))
    assert result.ready is False
    assert result.warnings == [CalculationWarning.STOP_EQUALS_ENTRY]
    assert result.direction is None
    assert result.max_leverage is None


@pytest.mark.parametrize(
    "entry, stop",
    [
        (None, 100),
        (100, None),
        (0, 100),
        (100, -5),
        (float("nan"), 100),
        (100, float("inf")),
        (True, 100),
        (10**400, 1),
        (1, 10**400),
        (-10**400, 1),
    ],
)
def test_malformed_prices_yield_empty_warnings(entry, stop):
    result = calculate_metrics(margin_inputs(entry_price=entry, stop_price=stop))
    assert result == CalculationResult(ready=False, warnings=[])


def test_missing_margin_returns_partial_result():
    result = calculate_metrics(margin_inputs(margin_capital=None))
    assert result.ready is False
    assert result.warnings == [CalculationWarning.INVALID_MARGIN]
    assert result.direction == Direction.LONG
    assert result.price_delta == 1450
    assert math.isclose(result.theoretical_max_leverage, 63250 / 1450)
    assert result.max_leverage is None


def test_missing_risk_value_in_margin_mode():
    result = calculate_metrics(margin_inputs(risk_value=0))
    assert result.ready is False
    assert result.warnings == [CalculationWarning.INVALID_LOSS]
    assert result.allowed_loss is None


def test_position_mode_percent_risk_is_rejected():
    result = calculate_metrics(position_inputs(risk_mode=RiskMode.PERCENT, risk_value=1))
    assert result.ready is False
    assert result.allowed_loss is None
    assert result.warnings == [CalculationWarning.PERCENT_POSITION, CalculationWarning.INVALID_LOSS]


def test_position_mode_within_allowed_loss():
    result = calculate_metrics(position_inputs())
    assert result.ready is True
    assert math.isclose(result.loss_at_stop, 100.0)
    assert result.required_margin == result.loss_at_stop
    assert math.isclose(result.max_position_size, 3000.0)
    assert math.isclose(result.risk_percent_of_capital, 150.0)
    assert result.max_leverage == result.theoretical_max_leverage == 100 / 5
    assert result.warnings == []


def test_position_mode_too_large_keeps_partial_figures():
    result = calculate_metrics(
        position_inputs(entry_price=63250, stop_price=61800, position_size=25000, risk_value=300)
    )
    assert result.ready is False
    assert result.warnings == [CalculationWarning.POSITION_TOO_LARGE]
    expected_loss = 1450 / 63250 * 25000
    assert math.isclose(result.loss_at_stop, expected_loss)
    assert math.isclose(result.max_position_size, 300 * 63250 / 1450)
    assert math.isclose(result.risk_percent_of_capital, 300 / expected_loss * 100)
    assert result.max_leverage == result.theoretical_max_leverage


def test_position_mode_requires_position_size():
    result = calculate_metrics(position_inputs(position_size=None))
    assert result.ready is False
    assert result.warnings == [CalculationWarning.INVALID_POSITION]
    assert result.loss_at_stop is None


def test_position_mode_requires_allowed_loss():
    result = calculate_metrics(position_inputs(risk_value=float("nan")))
    assert result.ready is False
    assert result.warnings == [CalculationWarning.INVALID_LOSS]


def test_take_profit_long_margin_mode():
    result = calculate_metrics(margin_inputs(entry_price=100, stop_price=95, margin_capital=1000, risk_value=50, take_profit=110))
    # max_leverage = 50*100/(1000*5) = 1 -> notional 1000
    assert math.isclose(result.max_position_size, 1000.0)
    assert math.isclose(result.expected_profit, 100.0)
    assert math.isclose(result.expected_return_pct, 10.0)
    assert math.isclose(result.risk_reward_ratio, 2.0)
    assert result.warnings == []


def test_take_profit_short_position_mode():
    result = calculate_metrics(
        position_inputs(entry_price=100, stop_price=104, position_size=1000, risk_value=50, take_profit=90)
    )
    assert result.ready is True
    assert math.isclose(result.expected_profit, 100.0)
    # required margin is the 40 USD loss at stop
    assert math.isclose(result.expected_return_pct, 250.0)
    assert math.isclose(result.risk_reward_ratio, 2.5)


def test_take_profit_on_wrong_side_of_entry():
    result = calculate_metrics(margin_inputs(take_profit=60000))
    assert result.ready is True
    assert result.warnings == [CalculationWarning.TAKE_PROFIT]
    assert result.expected_profit is None
    assert result.expected_return_pct is None
    assert result.risk_reward_ratio is None


def test_take_profit_equal_to_entry_is_flagged():
    result = calculate_metrics(margin_inputs(take_profit=63250))
    assert CalculationWarning.TAKE_PROFIT in result.warnings


def test_zero_take_profit_is_ignored():
    result = calculate_metrics(margin_inputs(take_profit=0))
    assert result.warnings == []
    assert result.expected_profit is None


def test_take_profit_skipped_when_position_inputs_incomplete():
    result = calculate_metrics(position_inputs(position_size=0, take_profit=120))
    assert result.warnings == [CalculationWarning.INVALID_POSITION]
    assert result.expected_profit is None


def test_plain_string_modes_are_accepted():
    result = calculate_metrics(margin_inputs(exposure_mode="margin", risk_mode="percent", risk_value=6))
    assert result.ready is True
    assert math.isclose(result.allowed_loss, 300.0)


def test_repeated_calls_are_identical():
    inputs = margin_inputs(take_profit=67200)
    first = calculate_metrics(inputs)
    second = calculate_metrics(inputs)
    assert first == second
    assert first is not second
    assert first.warnings is not second.warnings


def test_underflowing_margin_times_stop_distance_is_not_ready():
    result = calculate_metrics(margin_inputs(entry_price=1e-200, stop_price=2e-200, margin_capital=1e-200, risk_value=1.0))
    assert result.ready is False
    assert result.warnings == [CalculationWarning.INVALID_MARGIN]
    assert result.direction == Direction.SHORT
    assert result.price_delta == 1e-200
    assert math.isclose(result.theoretical_max_leverage, 1.0)
    assert result.max_leverage is None


def test_oversized_integer_amounts_are_treated_as_invalid():
    assert calculate_metrics(margin_inputs(margin_capital=10**400)).warnings == [CalculationWarning.INVALID_MARGIN]
    assert calculate_metrics(margin_inputs(risk_value=10**400)).warnings == [CalculationWarning.INVALID_LOSS]
    assert calculate_metrics(position_inputs(position_size=10**400)).warnings == [CalculationWarning.INVALID_POSITION]


def test_oversized_integer_take_profit_is_flagged():
    result = calculate_metrics(margin_inputs(take_profit=10**400))
    assert result.ready is True
    assert result.warnings == [CalculationWarning.TAKE_PROFIT]
    assert result.expected_profit is None
