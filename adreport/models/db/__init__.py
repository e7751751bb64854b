from .enums import ReportCategory, ReportType, RowSchema, row_schema_for
from .users import User
from .report_files import ReportFile
from .search_term_reports import SearchTermReport
from .ad_placement_reports import AdPlacementReport

__all__ = [
    "ReportCategory",
    "ReportType",
    "RowSchema",
    "row_schema_for",
    "User",
    "ReportFile",
    "SearchTermReport",
    "AdPlacementReport",
]
