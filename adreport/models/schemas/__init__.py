from .base import CamelModel, ResponseBase
from .reports import ReportHeader, ReportListItem, UploadResponse, RawDataResponse, CategoryNode
from .aggregates import (
    BucketMetrics,
    DimensionAggregate,
    CampaignPlacementAggregate,
    OverallSummary,
    CampaignSummaryResponse,
    PlacementAnalysisResponse,
    PlacementCampaignSummaryResponse,
    QuadrantItem,
    QuadrantData,
    QuadrantThresholds,
    QuadrantAnalysisResponse,
    KeywordCampaignDetail,
    KeywordCampaignEntry,
    KeywordMappingStatsSchema,
    KeywordCampaignMappingResponse,
)

__all__ = [
    # Base
    "CamelModel",
    "ResponseBase",

    # Reports
    "ReportHeader",
    "ReportListItem",
    "UploadResponse",
    "RawDataResponse",
    "CategoryNode",

    # Aggregates
    "BucketMetrics",
    "DimensionAggregate",
    "CampaignPlacementAggregate",
    "OverallSummary",
    "CampaignSummaryResponse",
    "PlacementAnalysisResponse",
    "PlacementCampaignSummaryResponse",
    "QuadrantItem",
    "QuadrantData",
    "QuadrantThresholds",
    "QuadrantAnalysisResponse",
    "KeywordCampaignDetail",
    "KeywordCampaignEntry",
    "KeywordMappingStatsSchema",
    "KeywordCampaignMappingResponse",
]
