"""Read-path builders: stored rows -> response schemas.

Each builder loads the canonical rows of one report, runs them through the
aggregation engine and converts the buckets into the camelCase response
models. Formatting (percent strings, two-decimal money) happens only in
`overall_summary()`; bucket values are passed through un-rounded.
"""
from __future__ import annotations

from typing import Any, Callable, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from adreport.config import QUADRANT_THRESHOLDS, REPORT_CATEGORIES, UNKNOWN_DATE_RANGE_LABEL
from adreport.models.db.ad_placement_reports import AdPlacementReport
from adreport.models.db.report_files import ReportFile
from adreport.models.db.search_term_reports import SearchTermReport
from adreport.models.schemas.aggregates import (
    CampaignPlacementAggregate,
    CampaignSummaryResponse,
    DimensionAggregate,
    KeywordCampaignDetail,
    KeywordCampaignEntry,
    KeywordCampaignMappingResponse,
    KeywordMappingStatsSchema,
    OverallSummary,
    PlacementAnalysisResponse,
    PlacementCampaignSummaryResponse,
    QuadrantAnalysisResponse,
    QuadrantData,
    QuadrantItem,
    QuadrantThresholds,
)
from adreport.models.schemas.reports import CategoryNode, RawDataResponse, ReportHeader, ReportListItem
from adreport.services.aggregation import AggregatedBucket, aggregate, attr_key, summarize
from adreport.services.keyword_mapping import build_keyword_campaign_mapping
from adreport.services.quadrant_classifier import classify_search_terms
from adreport.utils import timed
from adreport.utils.metrics import format_money, format_percent

T = TypeVar("T")


def _timed(operation: str, report_id: int, build: Callable[[], T]) -> T:
    with timed(operation, report_id=report_id):
        return build()


def report_header(report: ReportFile) -> ReportHeader:
    return ReportHeader(
        id=report.id,
        file_name=report.file_name,
        file_type=report.report_type,
        report_date_range=report.report_date_range or UNKNOWN_DATE_RANGE_LABEL,
        uploaded_at=report.uploaded_at,
    )


def _load_rows(session: Session, model: type, report_id: int) -> list[Any]:
    stmt = select(model).where(model.report_file_id == report_id).order_by(model.id)
    return list(session.execute(stmt).scalars())


def bucket_metrics(bucket: AggregatedBucket) -> dict[str, Any]:
    ratios = bucket.ratios
    return {
        "impressions": bucket.impressions,
        "clicks": bucket.clicks,
        "spend": float(bucket.spend),
        "sales": float(bucket.sales),
        "orders": bucket.orders,
        "units_sold": bucket.units_sold,
        **ratios.as_dict(),
    }


def dimension_aggregate(bucket: AggregatedBucket) -> DimensionAggregate:
    return DimensionAggregate(dimension_key=str(bucket.key), **bucket_metrics(bucket))


def overall_summary(total: AggregatedBucket) -> OverallSummary:
    ratios = total.ratios
    return OverallSummary(
        total_impressions=total.impressions,
        total_clicks=total.clicks,
        total_spend=float(total.spend),
        total_sales=float(total.sales),
        total_orders=total.orders,
        total_units_sold=total.units_sold,
        ctr=format_percent(ratios.ctr),
        acos=format_percent(ratios.acos),
        conversion_rate=format_percent(ratios.conversion_rate),
        roas=ratios.roas,
        cpc=format_money(ratios.cpc),
    )


# ------------------------------ Report files ------------------------------ #

def list_reports(session: Session, owner_id: int) -> list[ReportListItem]:
    stmt = (
        select(ReportFile)
        .where(ReportFile.user_id == owner_id)
        .order_by(ReportFile.uploaded_at.desc(), ReportFile.id.desc())
    )
    return [
        ReportListItem(
            id=report.id,
            file_name=report.file_name,
            report_category=report.report_category,
            report_type=report.report_type,
            report_date_range=report.report_date_range,
            uploaded_at=report.uploaded_at,
        )
        for report in session.execute(stmt).scalars()
    ]


def report_categories() -> list[CategoryNode]:
    return [CategoryNode.model_validate(node) for node in REPORT_CATEGORIES]


def raw_data(report: ReportFile) -> RawDataResponse:
    return RawDataResponse(report=report_header(report), content=report.content or [])


# ------------------------------ Search terms ------------------------------ #

def campaign_summary(session: Session, report: ReportFile) -> CampaignSummaryResponse:
    def build() -> CampaignSummaryResponse:
        rows = _load_rows(session, SearchTermReport, report.id)
        return CampaignSummaryResponse(
            report=report_header(report),
            campaigns=[dimension_aggregate(b) for b in aggregate(rows, attr_key("campaign_name"))],
            summary=overall_summary(summarize(rows)),
        )
    return _timed("campaign_summary", report.id, build)


def _quadrant_item(bucket: AggregatedBucket) -> QuadrantItem:
    ratios = bucket.ratios
    return QuadrantItem(
        id=bucket.first_row_id,
        keyword=str(bucket.key),
        impressions=bucket.impressions,
        clicks=bucket.clicks,
        orders=bucket.orders,
        ctr=ratios.ctr,
        cvr=ratios.conversion_rate,
        spend=float(bucket.spend),
        sales=float(bucket.sales),
    )


def quadrant_analysis(session: Session, report: ReportFile) -> QuadrantAnalysisResponse:
    def build() -> QuadrantAnalysisResponse:
        result = classify_search_terms(_load_rows(session, SearchTermReport, report.id))
        return QuadrantAnalysisResponse(
            report=report_header(report),
            quadrant_data=QuadrantData(
                star_keywords=[_quadrant_item(b) for b in result.star],
                problem_keywords=[_quadrant_item(b) for b in result.problem],
                potential_keywords=[_quadrant_item(b) for b in result.potential],
                ineffective_keywords=[_quadrant_item(b) for b in result.ineffective],
            ),
            thresholds=QuadrantThresholds(**QUADRANT_THRESHOLDS),
        )
    return _timed("quadrant_analysis", report.id, build)


def _keyword_entry(bucket: AggregatedBucket) -> KeywordCampaignEntry:
    details = [
        KeywordCampaignDetail(
            campaign_name=str(child.key),
            cvr=child.ratios.conversion_rate,
            **bucket_metrics(child),
        )
        for child in bucket.sub_buckets
    ]
    return KeywordCampaignEntry(
        keyword=str(bucket.key),
        campaign_count=len(details),
        campaigns=[detail.campaign_name for detail in details],
        cvr=bucket.ratios.conversion_rate,
        campaign_details=details,
        **bucket_metrics(bucket),
    )


def keyword_campaign_mapping(session: Session, report: ReportFile) -> KeywordCampaignMappingResponse:
    def build() -> KeywordCampaignMappingResponse:
        mapping = build_keyword_campaign_mapping(_load_rows(session, SearchTermReport, report.id))
        return KeywordCampaignMappingResponse(
            report=report_header(report),
            stats=KeywordMappingStatsSchema(
                total_keywords=mapping.stats.total_keywords,
                multi_campaign_keywords=mapping.stats.multi_campaign_keywords,
                max_campaign_count=mapping.stats.max_campaign_count,
            ),
            multi_campaign_keywords=[_keyword_entry(b) for b in mapping.multi_campaign_keywords],
            all_keywords_with_orders=[_keyword_entry(b) for b in mapping.keywords_with_orders],
        )
    return _timed("keyword_campaign_mapping", report.id, build)


# ------------------------------- Placements ------------------------------- #

def placement_analysis(session: Session, report: ReportFile) -> PlacementAnalysisResponse:
    def build() -> PlacementAnalysisResponse:
        rows = _load_rows(session, AdPlacementReport, report.id)
        return PlacementAnalysisResponse(
            report=report_header(report),
            placements=[dimension_aggregate(b) for b in aggregate(rows, attr_key("placement"))],
            summary=overall_summary(summarize(rows)),
        )
    return _timed("placement_analysis", report.id, build)


def placement_campaign_summary(session: Session, report: ReportFile) -> PlacementCampaignSummaryResponse:
    def build() -> PlacementCampaignSummaryResponse:
        rows = _load_rows(session, AdPlacementReport, report.id)
        campaigns = [
            CampaignPlacementAggregate(
                dimension_key=str(bucket.key),
                placements=[dimension_aggregate(child) for child in bucket.sub_buckets],
                **bucket_metrics(bucket),
            )
            for bucket in aggregate(rows, attr_key("campaign_name"), attr_key("placement"))
        ]
        return PlacementCampaignSummaryResponse(
            report=report_header(report),
            campaigns=campaigns,
            summary=overall_summary(summarize(rows)),
        )
    return _timed("placement_campaign_summary", report.id, build)


__all__ = [
    "report_header",
    "bucket_metrics",
    "overall_summary",
    "list_reports",
    "report_categories",
    "raw_data",
    "campaign_summary",
    "quadrant_analysis",
    "keyword_campaign_mapping",
    "placement_analysis",
    "placement_campaign_summary",
]
