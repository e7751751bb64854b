"""Core application configuration & tunable ingestion rules.

Everything that may differ between deployments (database URL, upload limits,
logging) can be overridden through environment variables; the business rules
that must stay fixed (quadrant thresholds, the report category tree) live here
as module constants so services and tests import one source of truth.
"""
from __future__ import annotations

import os
from typing import Final

# -------------------------------- Database -------------------------------- #
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./adreport.db")

# -------------------------------- Logging --------------------------------- #
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: str | None = os.getenv("LOG_FILE", "logs/app.log") or None

CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")

# --------------------------------- Upload --------------------------------- #
UPLOAD_SETTINGS: dict[str, int | str | tuple[str, ...]] = {
    "max_upload_bytes": int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),  # 10MB
    "accepted_extensions": (".csv", ".xlsx", ".xls"),
    # Excel-exported CSVs frequently carry a BOM
    "csv_encoding": "utf-8-sig",
    "default_category": "sp",
    "default_report_type": "SEARCH_TERM_REPORT",
}

# ---------------------------- Quadrant analysis --------------------------- #
# Fixed values, deliberately not read from the environment.
QUADRANT_THRESHOLDS: Final[dict[str, float]] = {
    "ctr": 0.10,
    "cvr": 0.10,
}

# ------------------------- Normalization defaults ------------------------- #
NORMALIZATION_DEFAULTS: dict[str, str] = {
    "campaign_name": "未知活动",
    "search_term_portfolio_name": "默认产品组合",
    "placement_portfolio_name": "默认广告组合",
    "customer_search_term": "未知搜索词",
    "placement": "未知广告位",
    "currency": "USD",
    "match_type": "exact",
}

UNKNOWN_DATE_RANGE_LABEL: str = "未知日期"

# ----------------------------- Report catalog ----------------------------- #
# Category -> selectable report types, as offered by the upload form.
REPORT_CATEGORIES: list[dict] = [
    {
        "value": "sp",
        "label": "商品推广",
        "children": [
            {"value": "SEARCH_TERM_REPORT", "label": "搜索词报告"},
            {"value": "TARGET_REPORT", "label": "投放报告"},
            {"value": "TARGETING_REPORT", "label": "按时间查看效果"},
            {"value": "AD_PLACEMENT_REPORT", "label": "广告位报告"},
        ],
    },
    {
        "value": "sb",
        "label": "品牌推广",
        "children": [
            {"value": "KEYWORD_REPORT", "label": "关键词"},
            {"value": "CAMPAIGN_REPORT", "label": "广告活动"},
        ],
    },
]

__all__ = [
    "DATABASE_URL",
    "LOG_LEVEL",
    "LOG_FILE",
    "CORS_ORIGINS",
    "UPLOAD_SETTINGS",
    "QUADRANT_THRESHOLDS",
    "NORMALIZATION_DEFAULTS",
    "UNKNOWN_DATE_RANGE_LABEL",
    "REPORT_CATEGORIES",
]
