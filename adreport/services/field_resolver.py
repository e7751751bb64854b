"""Canonical field resolution for bilingual report headers.

`FIELD_ALIASES` maps each canonical field to the header variants accepted for
it, in priority order. `resolve()` walks that list and takes the first variant
present in the record with a non-blank value; later variants are fallbacks and
are never merged with earlier ones. Coercion is total: a malformed cell yields
the typed default instead of an exception.
"""
from __future__ import annotations

import enum
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from adreport.utils.parsing import is_blank, parse_date, to_decimal, to_int, to_text


class FieldKind(str, enum.Enum):
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    TEXT = "text"


FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    # Dimensions
    "campaign_name": ("Campaign Name", "广告活动名称"),
    "portfolio_name": ("Portfolio Name", "广告组合名称"),
    "ad_group_name": ("Ad Group Name", "广告组名称"),
    "targeting": ("Targeting", "targeting", "投放"),
    "match_type": ("Match Type", "匹配类型"),
    "customer_search_term": ("Customer Search Term", "客户搜索词"),
    "currency": ("Currency", "货币"),
    "retailer": ("Retailer", "零售商"),
    "region": ("Region", "国家/地区"),
    "bidding_strategy": ("Bidding Strategy", "竞价策略"),
    "placement": ("Placement", "广告位", "放置"),
    # Dates
    "date": ("Date", "日期", "Report Date", "报告日期"),
    "start_date": ("Start Date", "开始日期"),
    "end_date": ("End Date", "结束日期"),
    # Base counters
    "impressions": ("Impressions", "展示量"),
    "clicks": ("Clicks", "点击量"),
    "spend": ("Spend", "花费"),
    "sales": ("Sales", "7天总销售额", "7 Day Total Sales"),
    "orders": ("Orders", "Total Orders", "总订单数", "7天总订单数(#)", "订单总数", "7 Day Total Orders (#)"),
    "units_sold": ("Units Sold", "Total Units", "Units", "总销售量", "总销量", "7天总销售量(#)"),
    # Report-supplied ratios (audit only)
    "ctr": ("CTR", "点击率(CTR)", "Click-Thru Rate (CTR)"),
    "cpc": ("CPC", "每次点击成本(CPC)", "Cost Per Click (CPC)"),
    "acos": ("ACOS", "广告成本销售比(ACOS)", "广告投入产出比 (ACOS) 总计", "Total Advertising Cost of Sales (ACOS)"),
    "roas": ("ROAS", "投入产出比(ROAS)", "总广告投资回报率 (ROAS)", "Total Return on Advertising Spend (ROAS)"),
    "conversion_rate": ("Conversion Rate", "7天的转化率", "7 Day Conversion Rate"),
}


def _default_for(kind: FieldKind) -> Any:
    if kind is FieldKind.INTEGER:
        return 0
    if kind is FieldKind.DECIMAL:
        return Decimal("0")
    if kind is FieldKind.DATE:
        return None
    return ""


def find_raw_value(record: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """First non-blank cell among `aliases`, in alias order; None when all are blank or absent."""
    for alias in aliases:
        if alias in record and not is_blank(record[alias]):
            return record[alias]
    return None


def coerce(value: Any, kind: FieldKind, default: Any = None) -> Any:
    if default is None:
        default = _default_for(kind)
    if kind is FieldKind.INTEGER:
        return to_int(value, default=default)
    if kind is FieldKind.DECIMAL:
        return to_decimal(value, default=Decimal(default))
    if kind is FieldKind.DATE:
        parsed = parse_date(value)
        return parsed if parsed is not None else default
    return to_text(value, default=default)


def resolve(
    record: Mapping[str, Any],
    canonical_name: str,
    default: Any = None,
    kind: FieldKind = FieldKind.TEXT,
    aliases: Optional[Sequence[str]] = None,
) -> Any:
    """Typed value of `canonical_name` in `record`.

    `aliases` overrides the table entry for one-off lookups. Unknown canonical
    names without explicit aliases fall back to matching the name itself.
    """
    variants = aliases if aliases is not None else FIELD_ALIASES.get(canonical_name, (canonical_name,))
    raw = find_raw_value(record, variants)
    return coerce(raw, kind, default)


def is_empty_record(record: Mapping[str, Any]) -> bool:
    return all(is_blank(value) for value in record.values())


__all__ = ["FieldKind", "FIELD_ALIASES", "find_raw_value", "coerce", "resolve", "is_empty_record"]
