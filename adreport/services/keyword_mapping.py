"""Search term -> campaign mapping for one search-term report.

Rows are grouped by search term with campaigns as the second level, so a
term's totals and every per-campaign detail get their ratios from their own
summed counters.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from adreport.services.aggregation import AggregatedBucket, aggregate, attr_key


@dataclass
class KeywordMappingStats:
    total_keywords: int = 0
    multi_campaign_keywords: int = 0
    max_campaign_count: int = 0


@dataclass
class KeywordCampaignMapping:
    stats: KeywordMappingStats
    multi_campaign_keywords: list[AggregatedBucket] = field(default_factory=list)
    keywords_with_orders: list[AggregatedBucket] = field(default_factory=list)


def build_keyword_campaign_mapping(rows: Iterable[Any]) -> KeywordCampaignMapping:
    keywords = aggregate(rows, attr_key("customer_search_term"), attr_key("campaign_name"))

    multi = [bucket for bucket in keywords if len(bucket.children) > 1]
    # sorted() is stable, so equal order counts keep first-seen order
    with_orders = sorted(
        (bucket for bucket in keywords if bucket.orders > 0),
        key=lambda bucket: bucket.orders,
        reverse=True,
    )
    stats = KeywordMappingStats(
        total_keywords=len(keywords),
        multi_campaign_keywords=len(multi),
        max_campaign_count=max((len(bucket.children) for bucket in keywords), default=0),
    )
    return KeywordCampaignMapping(stats=stats, multi_campaign_keywords=multi, keywords_with_orders=with_orders)


__all__ = ["KeywordMappingStats", "KeywordCampaignMapping", "build_keyword_campaign_mapping"]
