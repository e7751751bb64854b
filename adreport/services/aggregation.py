"""Group canonical rows and derive ratios from the summed counters.

`aggregate(rows, key_fn, sub_key_fn=None)` is a single fold over the rows
that returns a fresh, insertion-ordered list of `AggregatedBucket`. Every
ratio is read through `AggregatedBucket.ratios`, which calls
`compute_ratios()` on that bucket's own totals; per-row ratios are never
summed, averaged or even read here.

Rows only need the base counter attributes (impressions, clicks, spend,
sales, orders, units_sold), so ORM instances and plain objects both work.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Hashable, Iterable, Optional

from adreport.utils.metrics import safe_div

KeyFn = Callable[[Any], Hashable]


@dataclass(frozen=True)
class Ratios:
    ctr: float
    conversion_rate: float
    acos: float
    roas: float
    cpc: float

    def as_dict(self) -> dict[str, float]:
        return {
            "ctr": self.ctr,
            "conversion_rate": self.conversion_rate,
            "acos": self.acos,
            "roas": self.roas,
            "cpc": self.cpc,
        }


def compute_ratios(
    impressions: int,
    clicks: int,
    spend: Decimal | float,
    sales: Decimal | float,
    orders: int,
) -> Ratios:
    """Derived ratios for one set of summed counters; zero denominators give 0.0."""
    return Ratios(
        ctr=safe_div(clicks, impressions),
        conversion_rate=safe_div(orders, clicks),
        acos=safe_div(spend, sales),
        roas=safe_div(sales, spend),
        cpc=safe_div(spend, clicks),
    )


def _as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass
class AggregatedBucket:
    key: Hashable
    impressions: int = 0
    clicks: int = 0
    spend: Decimal = Decimal("0")
    sales: Decimal = Decimal("0")
    orders: int = 0
    units_sold: int = 0
    rows: int = 0
    first_row_id: Optional[int] = None
    children: dict[Hashable, "AggregatedBucket"] = field(default_factory=dict)

    def add(self, row: Any) -> None:
        self.impressions += row.impressions or 0
        self.clicks += row.clicks or 0
        self.spend += _as_decimal(row.spend)
        self.sales += _as_decimal(row.sales)
        self.orders += row.orders or 0
        self.units_sold += row.units_sold or 0
        self.rows += 1
        if self.first_row_id is None:
            self.first_row_id = getattr(row, "id", None)

    def child(self, key: Hashable) -> "AggregatedBucket":
        bucket = self.children.get(key)
        if bucket is None:
            bucket = AggregatedBucket(key=key)
            self.children[key] = bucket
        return bucket

    @property
    def ratios(self) -> Ratios:
        return compute_ratios(self.impressions, self.clicks, self.spend, self.sales, self.orders)

    @property
    def sub_buckets(self) -> list["AggregatedBucket"]:
        return list(self.children.values())


def aggregate(
    rows: Iterable[Any],
    key_fn: KeyFn,
    sub_key_fn: Optional[KeyFn] = None,
) -> list[AggregatedBucket]:
    """Buckets in first-seen key order; with `sub_key_fn`, each bucket also holds
    first-seen-ordered children whose counters sum to the parent's."""
    buckets: dict[Hashable, AggregatedBucket] = {}
    for row in rows:
        key = key_fn(row)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = AggregatedBucket(key=key)
            buckets[key] = bucket
        bucket.add(row)
        if sub_key_fn is not None:
            bucket.child(sub_key_fn(row)).add(row)
    return list(buckets.values())


def summarize(rows: Iterable[Any]) -> AggregatedBucket:
    """One bucket over the whole, ungrouped row set."""
    total = AggregatedBucket(key=None)
    for row in rows:
        total.add(row)
    return total


def attr_key(name: str) -> KeyFn:
    def _key(row: Any) -> Hashable:
        return getattr(row, name)
    return _key


__all__ = [
    "Ratios",
    "compute_ratios",
    "AggregatedBucket",
    "aggregate",
    "summarize",
    "attr_key",
]
