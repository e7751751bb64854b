"""Raw record -> canonical row payloads.

One payload (a plain dict keyed by column name) is produced per raw record,
ready for a bulk insert into `search_term_reports` or `ad_placement_reports`.
Records whose cells are all empty produce nothing.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from adreport.config import NORMALIZATION_DEFAULTS
from adreport.models.db.enums import ReportType, RowSchema, row_schema_for
from adreport.services.field_resolver import FieldKind, coerce, is_empty_record, resolve
from adreport.utils import get_logger
from adreport.utils.errors import NoValidRecordsError

logger = get_logger(__name__)

CanonicalRow = dict[str, Any]

_COUNTER_FIELDS = {
    "impressions": FieldKind.INTEGER,
    "clicks": FieldKind.INTEGER,
    "spend": FieldKind.DECIMAL,
    "sales": FieldKind.DECIMAL,
    "orders": FieldKind.INTEGER,
    "units_sold": FieldKind.INTEGER,
}

# Stored as supplied; aggregation never reads them
_SUPPLIED_RATIO_FIELDS = ("ctr", "cpc", "acos", "roas", "conversion_rate")


def _metrics(record: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name, kind in _COUNTER_FIELDS.items():
        value = resolve(record, name, kind=kind)
        # counters are never negative
        values[name] = value if value >= 0 else coerce(None, kind)
    for name in _SUPPLIED_RATIO_FIELDS:
        values[name] = resolve(record, name, kind=FieldKind.DECIMAL)
    return values


def _row_dates(record: Mapping[str, Any]) -> dict[str, Any]:
    start_date = resolve(record, "start_date", kind=FieldKind.DATE)
    end_date = resolve(record, "end_date", kind=FieldKind.DATE)
    row_date = resolve(record, "date", kind=FieldKind.DATE)
    return {
        "date": row_date if row_date is not None else start_date,
        "start_date": start_date,
        "end_date": end_date,
    }


def normalize_search_term_record(record: Mapping[str, Any], report_file_id: Optional[int] = None) -> CanonicalRow:
    dates = _row_dates(record)
    row: CanonicalRow = {
        "report_file_id": report_file_id,
        "date": dates["date"],
        "campaign_name": resolve(record, "campaign_name", NORMALIZATION_DEFAULTS["campaign_name"]),
        "portfolio_name": resolve(record, "portfolio_name", NORMALIZATION_DEFAULTS["search_term_portfolio_name"]),
        "ad_group_name": resolve(record, "ad_group_name", ""),
        "targeting": resolve(record, "targeting", ""),
        "match_type": resolve(record, "match_type", NORMALIZATION_DEFAULTS["match_type"]),
        "customer_search_term": resolve(
            record, "customer_search_term", NORMALIZATION_DEFAULTS["customer_search_term"]
        ),
        "currency": resolve(record, "currency", NORMALIZATION_DEFAULTS["currency"]),
    }
    row.update(_metrics(record))
    return row


def normalize_placement_record(record: Mapping[str, Any], report_file_id: Optional[int] = None) -> CanonicalRow:
    row: CanonicalRow = {"report_file_id": report_file_id}
    row.update(_row_dates(record))
    row.update(
        {
            "campaign_name": resolve(record, "campaign_name", NORMALIZATION_DEFAULTS["campaign_name"]),
            "portfolio_name": resolve(record, "portfolio_name", NORMALIZATION_DEFAULTS["placement_portfolio_name"]),
            "placement": resolve(record, "placement", NORMALIZATION_DEFAULTS["placement"]),
            "retailer": resolve(record, "retailer", ""),
            "region": resolve(record, "region", ""),
            "bidding_strategy": resolve(record, "bidding_strategy", ""),
            "currency": resolve(record, "currency", NORMALIZATION_DEFAULTS["currency"]),
        }
    )
    row.update(_metrics(record))
    return row


_NORMALIZERS: dict[RowSchema, Callable[[Mapping[str, Any], Optional[int]], CanonicalRow]] = {
    RowSchema.SEARCH_TERM: normalize_search_term_record,
    RowSchema.PLACEMENT: normalize_placement_record,
}


def normalize_records(
    records: Iterable[Mapping[str, Any]],
    report_type: ReportType | str,
    report_file_id: Optional[int] = None,
) -> list[CanonicalRow]:
    """Canonical payloads for every non-empty record.

    Raises NoValidRecordsError when nothing usable remains.
    """
    schema = row_schema_for(report_type)
    normalizer = _NORMALIZERS[schema]
    rows: list[CanonicalRow] = []
    skipped = 0
    for record in records:
        if is_empty_record(record):
            skipped += 1
            continue
        rows.append(normalizer(record, report_file_id))

    logger.debug(
        "Normalized report records",
        schema=schema.value,
        rows=len(rows),
        skipped_empty=skipped,
        report_file_id=report_file_id,
    )
    if not rows:
        raise NoValidRecordsError()
    return rows


__all__ = [
    "CanonicalRow",
    "normalize_search_term_record",
    "normalize_placement_record",
    "normalize_records",
]
