"""
Placement report analysis endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from adreport.api.deps import get_db, get_owned_report
from adreport.models.db import ReportFile
from adreport.models.schemas import PlacementAnalysisResponse, PlacementCampaignSummaryResponse
from adreport.services import report_summaries

router = APIRouter()

@router.get(
    "/placement-analysis/{report_id}",
    response_model=PlacementAnalysisResponse,
    summary="Per-placement totals"
)
async def get_placement_analysis(
    report: ReportFile = Depends(get_owned_report),
    db: Session = Depends(get_db)
) -> PlacementAnalysisResponse:
    return report_summaries.placement_analysis(db, report)

@router.get(
    "/placement-campaign-summary/{report_id}",
    response_model=PlacementCampaignSummaryResponse,
    summary="Campaign totals broken down by placement"
)
async def get_placement_campaign_summary(
    report: ReportFile = Depends(get_owned_report),
    db: Session = Depends(get_db)
) -> PlacementCampaignSummaryResponse:
    return report_summaries.placement_campaign_summary(db, report)
