"""
Command-line leverage calculator.

Usage (from repo root):
    python tools/calc_leverage.py --entry 63250 --stop 61800 --margin 5000 --risk 300
    python tools/calc_leverage.py --symbol BTCUSDT --stop 61800 --margin 5000 --risk 1 --risk-mode percent
    python tools/calc_leverage.py --entry 100 --stop 95 --mode position --position 2500 --risk 150 --tp 110

When --entry is omitted, --symbol is used to load the current Binance price.
Use --json to dump the raw result instead of the formatted table.
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lvcheck.core.config import get_settings
from lvcheck.core.format import format_leverage, format_number, format_percent
from lvcheck.core.messages import SUPPORTED_LANGUAGES, translate_warnings
from lvcheck.market.price_feed import BinancePriceFeed, PriceFeedError
from lvcheck.risk.leverage_calculator import (
    CalculationInputs,
    CalculationResult,
    ExposureMode,
    RiskMode,
    calculate_metrics,
)


def _usd(value: Optional[float]) -> str:
    return "-" if value is None else f"{format_number(value)} USD"


def _result_rows(result: CalculationResult, exposure_mode: ExposureMode) -> List[Tuple[str, str]]:
    direction = result.direction.value if result.direction else "-"
    rows = [
        ("Direction", direction),
        ("Stop distance", f"{_usd(result.price_delta)} ({format_percent(result.price_delta_pct)})"),
        ("Theoretical max leverage", format_leverage(result.theoretical_max_leverage)),
        ("Max leverage (risk-based)", format_leverage(result.max_leverage)),
        ("Allowed loss", _usd(result.allowed_loss)),
    ]
    if exposure_mode == ExposureMode.MARGIN:
        rows.append(("Max position size", _usd(result.max_position_size)))
    else:
        rows.append(("Loss at stop", _usd(result.loss_at_stop)))
        rows.append(("Position size within limit", _usd(result.max_position_size)))
    rows.append(("Loss as % of capital", format_percent(result.risk_percent_of_capital)))
    if result.risk_reward_ratio is not None:
        rows.append(("Risk/reward (R)", format_number(result.risk_reward_ratio)))
    if result.expected_profit is not None:
        rows.append(("Expected profit", _usd(result.expected_profit)))
    if result.expected_return_pct is not None:
        rows.append(("Expected return", format_percent(result.expected_return_pct)))
    return rows


def _print_table(result: CalculationResult, exposure_mode: ExposureMode, language: str) -> None:
    rows = _result_rows(result, exposure_mode)
    width = max(len(label) for label, _ in rows)
    print(f"Ready: {'yes' if result.ready else 'no'}")
    for label, value in rows:
        print(f"  {label:<{width}}  {value}")
    for message in translate_warnings(result.warnings, language):
        print(f"! {message}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute the maximum leverage for a stop and risk limit.")
    parser.add_argument("--entry", type=float, help="Entry price. Omit to load the current price for --symbol.")
    parser.add_argument("--stop", type=float, required=True, help="Stop price.")
    parser.add_argument("--tp", type=float, help="Optional take-profit price.")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ExposureMode],
        default=ExposureMode.MARGIN.value,
        help="Measure exposure against margin (default) or total position size.",
    )
    parser.add_argument("--margin", type=float, help="Margin capital (margin mode).")
    parser.add_argument("--position", type=float, help="Total position notional (position mode).")
    parser.add_argument(
        "--risk-mode",
        choices=[m.value for m in RiskMode],
        default=RiskMode.AMOUNT.value,
        help="Interpret --risk as an amount (default) or a percent of margin.",
    )
    parser.add_argument("--risk", type=float, help="Allowed loss amount or percent.")
    parser.add_argument("--symbol", help="Binance symbol used to load the entry price, e.g. BTCUSDT.")
    parser.add_argument("--lang", choices=SUPPORTED_LANGUAGES, help="Language for warning messages.")
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON.")
    args = parser.parse_args()

    settings = get_settings()
    entry = args.entry
    if entry is None and args.symbol:
        try:
            entry = BinancePriceFeed.from_settings(settings).fetch_price(args.symbol)
        except PriceFeedError as exc:
            print(f"Unable to load the current price: {exc}", file=sys.stderr)
            sys.exit(1)
        print(f"Loaded {args.symbol.upper()} price: {format_number(entry)}")

    exposure_mode = ExposureMode(args.mode)
    result = calculate_metrics(
        CalculationInputs(
            entry_price=entry,
            stop_price=args.stop,
            take_profit=args.tp,
            exposure_mode=exposure_mode,
            margin_capital=args.margin,
            position_size=args.position,
            risk_mode=RiskMode(args.risk_mode),
            risk_value=args.risk,
        )
    )

    if args.json:
        print(json.dumps(asdict(result), indent=2, default=lambda v: getattr(v, "value", str(v))))
    else:
        _print_table(result, exposure_mode, args.lang or settings.default_language)


if __name__ == "__main__":
    main()
