import math
from typing import Optional


def _missing(value: Optional[float]) -> bool:
    return value is None or math.isnan(value)


def format_number(value: Optional[float], fraction_digits: int = 2) -> str:
    """Thousands-separated number; large values drop their decimals."""
    if _missing(value):
        return "-"
    digits = 0 if abs(value) >= 1000 else fraction_digits
    return f"{value:,.{digits}f}"


def format_percent(value: Optional[float], fraction_digits: int = 2) -> str:
    if _missing(value):
        return "-"
    return f"{value:.{fraction_digits}f}%"


def format_leverage(value: Optional[float]) -> str:
    if value is None or not math.isfinite(value):
        return "-"
    return f"{value:.2f}x"
