"""Search-term quadrant classification.

Search terms are merged by exact text through the aggregation engine, then
split on fixed CTR / CVR thresholds (both 10%). Terms without impressions are
left out entirely rather than counted as ineffective.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable

from adreport.config import QUADRANT_THRESHOLDS
from adreport.services.aggregation import AggregatedBucket, aggregate, attr_key

CTR_THRESHOLD: float = QUADRANT_THRESHOLDS["ctr"]
CVR_THRESHOLD: float = QUADRANT_THRESHOLDS["cvr"]


class Quadrant(str, enum.Enum):
    STAR = "star"
    PROBLEM = "problem"
    POTENTIAL = "potential"
    INEFFECTIVE = "ineffective"


@dataclass
class QuadrantResult:
    star: list[AggregatedBucket] = field(default_factory=list)
    problem: list[AggregatedBucket] = field(default_factory=list)
    potential: list[AggregatedBucket] = field(default_factory=list)
    ineffective: list[AggregatedBucket] = field(default_factory=list)

    def bucket_list(self, quadrant: Quadrant) -> list[AggregatedBucket]:
        return getattr(self, quadrant.value)

    def total(self) -> int:
        return len(self.star) + len(self.problem) + len(self.potential) + len(self.ineffective)


def quadrant_for(ctr: float, cvr: float) -> Quadrant:
    high_ctr = ctr >= CTR_THRESHOLD
    high_cvr = cvr >= CVR_THRESHOLD
    if high_ctr and high_cvr:
        return Quadrant.STAR
    if high_ctr:
        return Quadrant.PROBLEM
    if high_cvr:
        return Quadrant.POTENTIAL
    return Quadrant.INEFFECTIVE


def classify_buckets(buckets: Iterable[AggregatedBucket]) -> QuadrantResult:
    result = QuadrantResult()
    for bucket in buckets:
        if bucket.impressions <= 0:
            continue
        ratios = bucket.ratios
        result.bucket_list(quadrant_for(ratios.ctr, ratios.conversion_rate)).append(bucket)
    return result


def classify_search_terms(rows: Iterable[Any]) -> QuadrantResult:
    """Merge rows per customer search term and classify the merged buckets."""
    return classify_buckets(aggregate(rows, attr_key("customer_search_term")))


__all__ = [
    "CTR_THRESHOLD",
    "CVR_THRESHOLD",
    "Quadrant",
    "QuadrantResult",
    "quadrant_for",
    "classify_buckets",
    "classify_search_terms",
]
