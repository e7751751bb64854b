"""Overall date span of an uploaded report."""
from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, Mapping, Optional

from adreport.utils.parsing import parse_date

# Matched case-insensitively as substrings of the header text
DATE_FIELD_KEYWORDS: tuple[str, ...] = (
    "date",
    "report date",
    "date range",
    "start date",
    "end date",
    "日期",
    "报告日期",
    "日期范围",
    "开始日期",
    "结束日期",
)

DATE_RANGE_SEPARATOR = "至"


def is_date_field(header: str) -> bool:
    lowered = str(header).lower()
    return any(keyword in lowered for keyword in DATE_FIELD_KEYWORDS)


def date_bounds(records: Iterable[Mapping[str, Any]]) -> Optional[tuple[dt.date, dt.date]]:
    earliest: Optional[dt.date] = None
    latest: Optional[dt.date] = None
    for record in records:
        for header, value in record.items():
            if not is_date_field(header):
                continue
            parsed = parse_date(value)
            if parsed is None:
                continue
            if earliest is None or parsed < earliest:
                earliest = parsed
            if latest is None or parsed > latest:
                latest = parsed
    if earliest is None or latest is None:
        return None
    return earliest, latest


def extract_date_range(records: Iterable[Mapping[str, Any]]) -> Optional[str]:
    """'2024-01-01至2024-01-10' across every date-like column, None when nothing parses."""
    bounds = date_bounds(records)
    if bounds is None:
        return None
    earliest, latest = bounds
    return f"{earliest.isoformat()}{DATE_RANGE_SEPARATOR}{latest.isoformat()}"


__all__ = ["DATE_FIELD_KEYWORDS", "is_date_field", "date_bounds", "extract_date_range"]
