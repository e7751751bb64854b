"""Typed ingestion failures.

Each error carries a stable ``reason`` code for callers/tests and a user-facing
message the HTTP layer returns as-is. Field-level parse failures are absorbed by
the field resolver and never show up here.
"""
from __future__ import annotations


class ReportIngestionError(Exception):
    reason: str = "ingestion_failure"
    user_message: str = "报告上传失败，请确保文件格式正确"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.user_message
        super().__init__(self.detail)


class UnsupportedFormatError(ReportIngestionError):
    reason = "unsupported_format"
    user_message = "不支持的文件格式，请上传CSV或Excel文件"

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported file extension: {extension or '<none>'}")


class DecodeError(ReportIngestionError):
    reason = "decode_failure"


class NoValidRecordsError(ReportIngestionError):
    reason = "no_valid_records"
    user_message = "上传的报表没有有效数据记录"


class NoRecordsError(NoValidRecordsError):
    """Decoder produced zero data rows; raised before anything is persisted."""

    reason = "no_records"


class PersistenceFailureError(ReportIngestionError):
    reason = "persistence_failure"
    user_message = "数据处理失败，请检查报表数据格式"


__all__ = [
    "ReportIngestionError",
    "UnsupportedFormatError",
    "DecodeError",
    "NoValidRecordsError",
    "NoRecordsError",
    "PersistenceFailureError",
]
