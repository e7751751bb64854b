"""Safe scalar parsing for report cells.

Every helper here is total: malformed input yields the caller's default and
never raises. Cells arrive as whatever the decoder produced (str from CSV,
int/float/datetime from spreadsheets, NaN from pandas).
"""
from __future__ import annotations

import datetime as dt
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

_NUM_CLEAN_RE = re.compile(r"[,$￥¥€%\s]")
_PLACEHOLDERS = {"--", "-", "n/a", "na", "nan", "none", "null"}

# Excel serial day numbers accepted as dates: 2000-01-01 .. 2100-01-01
_EXCEL_EPOCH = dt.date(1899, 12, 30)
_EXCEL_SERIAL_RANGE = (36526, 73051)

_INT64_RANGE = (-(2 ** 63), 2 ** 63 - 1)

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%Y%m%d",
    "%Y年%m月%d日",
    "%m/%d/%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)


def is_blank(value: Any) -> bool:
    """True for values a report cell can hold when nothing was entered."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _clean_numeric_text(value: str) -> Optional[str]:
    s = _NUM_CLEAN_RE.sub("", value.strip())
    if not s or s.lower() in _PLACEHOLDERS:
        return None
    return s


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """
    '1,234.56' / '$12.3' / '  9.9 ' / None / '--' -> Decimal, default on failure.
    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if is_blank(value) or isinstance(value, bool):
        return default
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, (int, float)):
            result = Decimal(str(value))
        elif isinstance(value, str):
            cleaned = _clean_numeric_text(value)
            if cleaned is None:
                return default
            result = Decimal(cleaned)
        else:
            return default
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def to_int(value: Any, default: int = 0) -> int:
    """
    Integer parse that truncates fractional input ('12.7' -> 12) and never yields NaN.
    Results outside the signed 64-bit range ('1e30') give the default; no
    INTEGER column can store them.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        result = value
    else:
        result = to_decimal(value, default=Decimal("NaN"))
        if not result.is_finite():
            return default
    low, high = _INT64_RANGE
    # bounds are checked on the Decimal, before int()
    if not low <= result <= high:
        return default
    return int(result)


def to_text(value: Any, default: str = "") -> str:
    if is_blank(value):
        return default
    if isinstance(value, float) and value.is_integer():
        # spreadsheets return numeric-looking names as floats (2024 -> 2024.0)
        return str(int(value))
    return str(value).strip()


def parse_date(value: Any) -> Optional[dt.date]:
    """
    Supports:
    - date / datetime objects (spreadsheet cells, pandas Timestamps)
    - ISO strings, 2024/01/03, 20240103, 2024年01月03日, 01/03/2024, Jan 3, 2024
    - Excel serial numbers such as 45294.0
    Anything else -> None (never a sentinel date).
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, (int, float, Decimal)):
        try:
            serial = int(float(value))
        except (ValueError, OverflowError):
            return None
        low, high = _EXCEL_SERIAL_RANGE
        if low <= serial <= high:
            return _EXCEL_EPOCH + dt.timedelta(days=serial)
        return None
    if not isinstance(value, str):
        return None

    s = value.strip()
    try:
        return dt.datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


__all__ = ["is_blank", "to_decimal", "to_int", "to_text", "parse_date"]
