"""
Pydantic schemas for aggregated report metrics.

Bucket ratios are raw fractions (acos = spend / sales, not x100); only the
overall summary carries preformatted percentage strings.
"""
from typing import List
from pydantic import Field
from .base import CamelModel
from .reports import ReportHeader

class BucketMetrics(CamelModel):
    impressions: int = 0
    clicks: int = 0
    spend: float = 0.0
    sales: float = 0.0
    orders: int = 0
    units_sold: int = 0
    ctr: float = 0.0
    acos: float = 0.0
    roas: float = 0.0
    conversion_rate: float = 0.0
    cpc: float = 0.0

class DimensionAggregate(BucketMetrics):
    dimension_key: str

class CampaignPlacementAggregate(DimensionAggregate):
    """Campaign bucket with its per-placement breakdown."""
    placements: List[DimensionAggregate] = Field(default_factory=list)

class OverallSummary(CamelModel):
    total_impressions: int = 0
    total_clicks: int = 0
    total_spend: float = 0.0
    total_sales: float = 0.0
    total_orders: int = 0
    total_units_sold: int = 0
    ctr: str = Field(description="Percentage string, e.g. '10.40%'")
    acos: str = Field(description="Percentage string")
    conversion_rate: str = Field(description="Percentage string")
    roas: float = 0.0
    cpc: str = Field(description="Two-decimal money string")

class CampaignSummaryResponse(CamelModel):
    report: ReportHeader
    campaigns: List[DimensionAggregate]
    summary: OverallSummary

class PlacementAnalysisResponse(CamelModel):
    report: ReportHeader
    placements: List[DimensionAggregate]
    summary: OverallSummary

class PlacementCampaignSummaryResponse(CamelModel):
    report: ReportHeader
    campaigns: List[CampaignPlacementAggregate]
    summary: OverallSummary

class QuadrantItem(CamelModel):
    id: int | None = Field(None, description="Id of the first row merged into this search term")
    keyword: str
    impressions: int
    clicks: int
    orders: int
    ctr: float
    cvr: float
    spend: float
    sales: float

class QuadrantData(CamelModel):
    star_keywords: List[QuadrantItem] = Field(default_factory=list)
    problem_keywords: List[QuadrantItem] = Field(default_factory=list)
    potential_keywords: List[QuadrantItem] = Field(default_factory=list)
    ineffective_keywords: List[QuadrantItem] = Field(default_factory=list)

class QuadrantThresholds(CamelModel):
    ctr: float
    cvr: float

class QuadrantAnalysisResponse(CamelModel):
    report: ReportHeader
    quadrant_data: QuadrantData
    thresholds: QuadrantThresholds

class KeywordCampaignDetail(BucketMetrics):
    campaign_name: str
    cvr: float = 0.0

class KeywordCampaignEntry(BucketMetrics):
    keyword: str
    campaign_count: int
    campaigns: List[str]
    cvr: float = 0.0
    campaign_details: List[KeywordCampaignDetail] = Field(default_factory=list)

class KeywordMappingStatsSchema(CamelModel):
    total_keywords: int = 0
    multi_campaign_keywords: int = 0
    max_campaign_count: int = 0

class KeywordCampaignMappingResponse(CamelModel):
    report: ReportHeader
    stats: KeywordMappingStatsSchema
    multi_campaign_keywords: List[KeywordCampaignEntry]
    all_keywords_with_orders: List[KeywordCampaignEntry]
