import csv
import io
from datetime import datetime
from enum import Enum
from typing import Any, Sequence

from lvcheck.journal.trade_store import TradeRecord

CSV_HEADERS = (
    "index",
    "created_at",
    "exchange",
    "symbol",
    "direction",
    "entry_price",
    "stop_price",
    "take_profit",
    "exposure_mode",
    "risk_mode",
    "margin_capital",
    "position_size",
    "risk_value",
    "price_delta",
    "price_delta_pct",
    "theoretical_max_leverage",
    "max_leverage",
    "max_position_size",
    "allowed_loss",
    "loss_at_stop",
    "risk_percent_of_capital",
    "risk_reward_ratio",
    "expected_profit",
    "expected_return_pct",
    "exit_outcome",
    "notes",
)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def trades_to_csv(records: Sequence[TradeRecord]) -> str:
    """Render records as CSV text with a header row; empty input yields ''."""
    if not records:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for position, record in enumerate(records, start=1):
        row = [position]
        row.extend(_cell(getattr(record, header)) for header in CSV_HEADERS[1:])
        writer.writerow(row)
    return buffer.getvalue()
