"""
Search-term report analysis endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from adreport.api.deps import get_db, get_owned_report
from adreport.models.db import ReportFile
from adreport.models.schemas import KeywordCampaignMappingResponse, QuadrantAnalysisResponse
from adreport.services import report_summaries

router = APIRouter()

@router.get(
    "/quadrant-analysis/{report_id}",
    response_model=QuadrantAnalysisResponse,
    summary="CTR / CVR quadrant classification of search terms"
)
async def get_quadrant_analysis(
    report: ReportFile = Depends(get_owned_report),
    db: Session = Depends(get_db)
) -> QuadrantAnalysisResponse:
    return report_summaries.quadrant_analysis(db, report)

@router.get(
    "/keyword-campaign-mapping/{report_id}",
    response_model=KeywordCampaignMappingResponse,
    summary="Search terms spread across campaigns"
)
async def get_keyword_campaign_mapping(
    report: ReportFile = Depends(get_owned_report),
    db: Session = Depends(get_db)
) -> KeywordCampaignMappingResponse:
    return report_summaries.keyword_campaign_mapping(db, report)
