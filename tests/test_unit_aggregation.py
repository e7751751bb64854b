from decimal import Decimal
from types import SimpleNamespace

import pytest

from adreport.services.aggregation import aggregate, attr_key, compute_ratios, summarize


def make_row(row_id=None, **kwargs):
    values = dict(
        id=row_id, campaign_name="A", placement="Top", customer_search_term="shoes",
        impressions=0, clicks=0, spend=Decimal("0"), sales=Decimal("0"), orders=0, units_sold=0,
        ctr=Decimal("0.9999"),
    )
    values.update(kwargs)
    return SimpleNamespace(**values)


def test_ratio_derived_from_summed_counters_not_averaged():
    rows = [
        make_row(1, impressions=1000, clicks=100),  # ctr 0.10
        make_row(2, impressions=10, clicks=5),  # ctr 0.50
    ]
    [bucket] = aggregate(rows, attr_key("campaign_name"))
    assert bucket.impressions == 1010 and bucket.clicks == 105
    assert bucket.ratios.ctr == pytest.approx(105 / 1010)
    assert bucket.ratios.ctr != pytest.approx(0.3)


def test_stored_row_ratios_are_ignored():
    [bucket] = aggregate([make_row(impressions=100, clicks=1, ctr=Decimal("0.5"))], attr_key("campaign_name"))
    assert bucket.ratios.ctr == pytest.approx(0.01)


def test_zero_denominators_yield_exact_zero():
    ratios = compute_ratios(impressions=0, clicks=0, spend=Decimal("5"), sales=Decimal("0"), orders=3)
    assert ratios.ctr == 0.0
    assert ratios.conversion_rate == 0.0
    assert ratios.cpc == 0.0
    assert ratios.acos == 0.0
    assert compute_ratios(10, 2, Decimal("0"), Decimal("0"), 0).roas == 0.0


def test_all_ratio_formulas():
    ratios = compute_ratios(impressions=200, clicks=20, spend=Decimal("10"), sales=Decimal("40"), orders=5)
    assert ratios.ctr == pytest.approx(0.1)
    assert ratios.conversion_rate == pytest.approx(0.25)
    assert ratios.acos == pytest.approx(0.25)
    assert ratios.roas == pytest.approx(4.0)
    assert ratios.cpc == pytest.approx(0.5)


def test_first_seen_insertion_order():
    rows = [make_row(campaign_name=name) for name in ["zeta", "alpha", "zeta", "mid", "alpha"]]
    buckets = aggregate(rows, attr_key("campaign_name"))
    assert [b.key for b in buckets] == ["zeta", "alpha", "mid"]
    assert [b.rows for b in buckets] == [2, 2, 1]


def test_two_level_grouping_children_sum_to_parent():
    rows = [
        make_row(1, campaign_name="A", placement="Top", impressions=100, clicks=10, spend=Decimal("5"), sales=Decimal("20"), orders=2),
        make_row(2, campaign_name="A", placement="Rest", impressions=900, clicks=9, spend=Decimal("1.5"), sales=Decimal("0"), orders=0),
        make_row(3, campaign_name="A", placement="Top", impressions=100, clicks=0, spend=Decimal("0"), sales=Decimal("0"), orders=0),
        make_row(4, campaign_name="B", placement="Top", impressions=50, clicks=5, spend=Decimal("2"), sales=Decimal("8"), orders=1),
    ]
    buckets = aggregate(rows, attr_key("campaign_name"), attr_key("placement"))
    a = buckets[0]
    assert [c.key for c in a.sub_buckets] == ["Top", "Rest"]
    assert sum(c.impressions for c in a.sub_buckets) == a.impressions == 1100
    assert sum(c.spend for c in a.sub_buckets) == a.spend == Decimal("6.5")
    top = a.children["Top"]
    assert top.ratios.ctr == pytest.approx(10 / 200)
    assert a.ratios.ctr == pytest.approx(19 / 1100)
    assert a.first_row_id == 1 and buckets[1].first_row_id == 4


def test_decimal_sums_do_not_drift():
    rows = [make_row(spend=Decimal("0.10")) for _ in range(3)]
    assert summarize(rows).spend == Decimal("0.30")


def test_summarize_matches_ungrouped_totals():
    rows = [
        make_row(campaign_name="A", impressions=100, clicks=10, orders=1),
        make_row(campaign_name="B", impressions=300, clicks=30, orders=9),
    ]
    total = summarize(rows)
    assert total.impressions == 400
    assert total.ratios.conversion_rate == pytest.approx(10 / 40)


def test_each_call_returns_fresh_buckets():
    rows = [make_row(impressions=10)]
    first = aggregate(rows, attr_key("campaign_name"))
    second = aggregate(rows, attr_key("campaign_name"))
    assert first[0] is not second[0]
    assert second[0].impressions == 10
