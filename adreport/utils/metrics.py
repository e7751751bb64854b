"""Pure metric math helpers used by aggregation & presentation."""
from __future__ import annotations

from decimal import Decimal


def safe_div(numerator: float | int | Decimal, denominator: float | int | Decimal) -> float:
    if denominator in (0, 0.0):
        return 0.0
    return float(numerator) / float(denominator)


def format_percent(ratio: float) -> str:
    """Render a fraction as a two-decimal percentage string, e.g. 0.1234 -> '12.34%'."""
    return f"{ratio * 100:.2f}%"


def format_money(value: float | Decimal) -> str:
    return f"{float(value):.2f}"


__all__ = ["safe_div", "format_percent", "format_money"]
