"""Central Enum definitions for report categories and types.

These replace scattered string literals to ensure consistency across
DB models, schemas, and ingestion logic.
"""
from __future__ import annotations
import enum


class ReportCategory(str, enum.Enum):
    SPONSORED_PRODUCTS = "sp"
    SPONSORED_BRANDS = "sb"


class ReportType(str, enum.Enum):
    SEARCH_TERM_REPORT = "SEARCH_TERM_REPORT"
    TARGET_REPORT = "TARGET_REPORT"
    TARGETING_REPORT = "TARGETING_REPORT"
    AD_PLACEMENT_REPORT = "AD_PLACEMENT_REPORT"
    KEYWORD_REPORT = "KEYWORD_REPORT"
    CAMPAIGN_REPORT = "CAMPAIGN_REPORT"


class RowSchema(str, enum.Enum):
    """Canonical row shape an uploaded file is normalized into."""
    SEARCH_TERM = "search_term"
    PLACEMENT = "placement"


def row_schema_for(report_type: ReportType | str) -> RowSchema:
    # Only placement reports have their own shape; every other type is read as search terms.
    if ReportType(report_type) == ReportType.AD_PLACEMENT_REPORT:
        return RowSchema.PLACEMENT
    return RowSchema.SEARCH_TERM


__all__ = [
    "ReportCategory",
    "ReportType",
    "RowSchema",
    "row_schema_for",
]
