from decimal import Decimal
from types import SimpleNamespace

import pytest

from adreport.services.keyword_mapping import build_keyword_campaign_mapping


def row(term, campaign, impressions=100, clicks=10, orders=0):
    return SimpleNamespace(
        id=None, customer_search_term=term, campaign_name=campaign,
        impressions=impressions, clicks=clicks, orders=orders,
        spend=Decimal("1.00"), sales=Decimal("4.00"), units_sold=0,
    )


def test_stats_and_multi_campaign_terms():
    rows = [
        row("shoes", "A", orders=1),
        row("shoes", "B", orders=3),
        row("hat", "A"),
        row("shoes", "C"),
        row("sock", "B", orders=2),
        row("sock", "C"),
    ]
    mapping = build_keyword_campaign_mapping(rows)
    assert mapping.stats.total_keywords == 3
    assert mapping.stats.multi_campaign_keywords == 2
    assert mapping.stats.max_campaign_count == 3

    shoes, sock = mapping.multi_campaign_keywords
    assert shoes.key == "shoes"
    assert [c.key for c in shoes.sub_buckets] == ["A", "B", "C"]
    assert shoes.orders == 4
    assert shoes.ratios.conversion_rate == pytest.approx(4 / 30)
    assert shoes.children["B"].ratios.conversion_rate == pytest.approx(0.3)
    assert sock.key == "sock"


def test_keywords_with_orders_sorted_desc_and_stable():
    rows = [
        row("first", "A", orders=2),
        row("none", "A", orders=0),
        row("big", "A", orders=5),
        row("second", "B", orders=2),
    ]
    mapping = build_keyword_campaign_mapping(rows)
    assert [b.key for b in mapping.keywords_with_orders] == ["big", "first", "second"]


def test_empty_rows():
    mapping = build_keyword_campaign_mapping([])
    assert mapping.stats.total_keywords == 0
    assert mapping.stats.max_campaign_count == 0
    assert mapping.multi_campaign_keywords == []
