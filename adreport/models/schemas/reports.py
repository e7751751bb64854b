"""
Pydantic schemas for uploaded report files.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import Field
from .base import CamelModel, ResponseBase

class ReportHeader(CamelModel):
    """Header block returned with every report read."""
    id: int
    file_name: str
    file_type: Optional[str] = Field(None, description="Report type tag, e.g. SEARCH_TERM_REPORT")
    report_date_range: str = Field(description="'YYYY-MM-DD至YYYY-MM-DD' or '未知日期'")
    uploaded_at: Optional[datetime] = None

class ReportListItem(CamelModel):
    id: int
    file_name: str
    report_category: Optional[str] = None
    report_type: Optional[str] = None
    report_date_range: Optional[str] = None
    uploaded_at: Optional[datetime] = None

class UploadResponse(ResponseBase):
    report_id: int
    rows_inserted: int = 0

class RawDataResponse(CamelModel):
    report: ReportHeader
    content: List[Dict[str, Any]]

class CategoryNode(CamelModel):
    value: str
    label: str
    children: List["CategoryNode"] = Field(default_factory=list)

CategoryNode.model_rebuild()
