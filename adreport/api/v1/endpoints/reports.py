"""
Report upload and report-file endpoints with audit logging.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from sqlalchemy.orm import Session
from adreport.api.deps import get_db, get_current_user, get_owned_report
from adreport.config import UPLOAD_SETTINGS
from adreport.models.db import ReportFile, User
from adreport.models.schemas import (
    CampaignSummaryResponse,
    CategoryNode,
    RawDataResponse,
    ReportListItem,
    UploadResponse,
)
from adreport.services import report_summaries
from adreport.services.report_ingestion import ingest_report
from adreport.utils import get_logger

router = APIRouter()
logger = get_logger(__name__)

@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an advertising report",
    description="Upload a CSV / XLSX / XLS export; rows are normalized and stored under the report file"
)
async def upload_report(
    request: Request,
    file: UploadFile = File(...),
    report_category: Optional[str] = Form(None, alias="reportCategory"),
    report_type: Optional[str] = Form(None, alias="reportType"),
    file_name: Optional[str] = Form(None, alias="fileName"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> UploadResponse:
    request_id = getattr(request.state, "request_id", None)
    max_bytes = int(UPLOAD_SETTINGS["max_upload_bytes"])

    buffer = await file.read(max_bytes + 1)
    if len(buffer) > max_bytes:
        logger.warning(
            "Upload rejected: file too large",
            user_id=current_user.id,
            file_name=file.filename,
            max_bytes=max_bytes,
            request_id=request_id
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="文件大小超过限制"
        )

    logger.info(
        "Report upload started",
        user_id=current_user.id,
        file_name=file.filename,
        report_category=report_category,
        report_type=report_type,
        bytes=len(buffer),
        request_id=request_id
    )

    result = ingest_report(
        db,
        owner_id=current_user.id,
        buffer=buffer,
        upload_file_name=file.filename or "",
        report_category=report_category,
        report_type=report_type,
        form_file_name=file_name,
        request_id=request_id,
    )
    return UploadResponse(
        message="报告上传成功",
        report_id=result.report_file_id,
        rows_inserted=result.rows_inserted,
    )

@router.get("/list", response_model=List[ReportListItem], summary="List the caller's reports")
async def list_reports(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> List[ReportListItem]:
    return report_summaries.list_reports(db, current_user.id)

@router.get("/categories", response_model=List[CategoryNode], summary="Report category tree")
async def list_categories(current_user: User = Depends(get_current_user)) -> List[CategoryNode]:
    return report_summaries.report_categories()

@router.get("/raw-data/{report_id}", response_model=RawDataResponse, summary="Raw uploaded records")
async def get_raw_data(report: ReportFile = Depends(get_owned_report)) -> RawDataResponse:
    return report_summaries.raw_data(report)

@router.get(
    "/campaign-summary/{report_id}",
    response_model=CampaignSummaryResponse,
    summary="Per-campaign totals of a search-term report"
)
async def get_campaign_summary(
    report: ReportFile = Depends(get_owned_report),
    db: Session = Depends(get_db)
) -> CampaignSummaryResponse:
    return report_summaries.campaign_summary(db, report)
