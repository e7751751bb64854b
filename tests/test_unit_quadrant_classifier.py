from decimal import Decimal
from types import SimpleNamespace

from adreport.services.quadrant_classifier import (
    CTR_THRESHOLD,
    CVR_THRESHOLD,
    Quadrant,
    classify_search_terms,
    quadrant_for,
)


def term(name, impressions, clicks, orders, row_id=None):
    return SimpleNamespace(
        id=row_id, customer_search_term=name, campaign_name="A",
        impressions=impressions, clicks=clicks, orders=orders,
        spend=Decimal("1"), sales=Decimal("2"), units_sold=0,
    )


def test_thresholds_are_ten_percent():
    assert CTR_THRESHOLD == 0.10
    assert CVR_THRESHOLD == 0.10


def test_decision_table_boundaries_are_inclusive():
    assert quadrant_for(0.10, 0.10) is Quadrant.STAR
    assert quadrant_for(0.10, 0.0999) is Quadrant.PROBLEM
    assert quadrant_for(0.0999, 0.10) is Quadrant.POTENTIAL
    assert quadrant_for(0.0, 0.0) is Quadrant.INEFFECTIVE


def test_classification_partitions_terms_with_impressions():
    rows = [
        term("star", 100, 20, 5),
        term("problem", 100, 20, 1),
        term("potential", 1000, 10, 5),
        term("ineffective", 1000, 10, 0),
        term("no-impressions", 0, 0, 0),
    ]
    result = classify_search_terms(rows)
    assert [b.key for b in result.star] == ["star"]
    assert [b.key for b in result.problem] == ["problem"]
    assert [b.key for b in result.potential] == ["potential"]
    assert [b.key for b in result.ineffective] == ["ineffective"]

    keys = [b.key for q in Quadrant for b in result.bucket_list(q)]
    assert len(keys) == len(set(keys)) == result.total() == 4
    assert "no-impressions" not in keys


def test_duplicate_terms_are_merged_before_classifying():
    # Individually: 0.10 ctr + 0.50 ctr; merged ctr 105/1010 and cvr 11/105 -> star
    rows = [term("shoes", 1000, 100, 10, row_id=1), term("shoes", 10, 5, 1, row_id=2)]
    result = classify_search_terms(rows)
    assert len(result.star) == 1
    bucket = result.star[0]
    assert bucket.impressions == 1010 and bucket.first_row_id == 1


def test_order_within_quadrant_follows_first_appearance():
    rows = [term("b", 10, 0, 0), term("a", 10, 0, 0), term("b", 10, 0, 0)]
    assert [b.key for b in classify_search_terms(rows).ineffective] == ["b", "a"]
