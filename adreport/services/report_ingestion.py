"""Report upload orchestrator.

`ingest_report(session, ...)`:
1. Decodes the uploaded bytes (unsupported extension / unreadable file fail here).
2. Rejects uploads with zero data rows before anything is written.
3. Derives the report date range and commits the ReportFile with the raw records.
4. Normalizes every record into canonical rows for the report's row schema.
5. Bulk-inserts the rows in a second unit of work.

Steps 4 and 5 are compensated: if normalization yields nothing or the bulk
insert fails, the ReportFile from step 3 is deleted again so an upload is
all-or-nothing at the file level.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import unquote

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adreport.config import UPLOAD_SETTINGS
from adreport.models.db.ad_placement_reports import AdPlacementReport
from adreport.models.db.enums import ReportType, RowSchema, row_schema_for
from adreport.models.db.report_files import ReportFile
from adreport.models.db.search_term_reports import SearchTermReport
from adreport.services.date_range import extract_date_range
from adreport.services.record_normalizer import CanonicalRow, normalize_records
from adreport.services.tabular_decoder import RawRecord, decode
from adreport.utils import AuditEvent, get_logger, log_business_event, timed
from adreport.utils.errors import (
    NoRecordsError,
    NoValidRecordsError,
    PersistenceFailureError,
    ReportIngestionError,
)

logger = get_logger(__name__)

ROW_MODELS = {
    RowSchema.SEARCH_TERM: SearchTermReport,
    RowSchema.PLACEMENT: AdPlacementReport,
}


@dataclass
class IngestionResult:
    report_file_id: int
    file_name: str
    report_type: str
    rows_inserted: int
    report_date_range: Optional[str]


def resolve_file_name(form_file_name: Optional[str], upload_file_name: Optional[str]) -> str:
    """Browsers percent-encode non-ASCII names in the form field; decode those."""
    fallback = upload_file_name or "report"
    if not form_file_name:
        return fallback
    if "%" not in form_file_name:
        return form_file_name
    try:
        return unquote(form_file_name, errors="strict")
    except UnicodeDecodeError:
        logger.warning("Could not decode form file name", file_name=form_file_name)
        return fallback


def _coerce_report_type(report_type: Optional[str]) -> ReportType:
    value = report_type or UPLOAD_SETTINGS["default_report_type"]
    try:
        return ReportType(value)
    except ValueError as exc:
        raise ReportIngestionError(f"Unknown report type: {value}") from exc


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else value
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    return str(value)


def json_safe_records(records: list[RawRecord]) -> list[dict[str, Any]]:
    return [{key: _json_safe(value) for key, value in record.items()} for record in records]


def _bulk_insert_rows(session: Session, model: type, rows: list[CanonicalRow]) -> None:
    session.execute(insert(model), rows)


def _rollback_report_file(session: Session, report_file_id: int, reason: str, owner_id: int) -> None:
    session.rollback()
    try:
        report_file = session.get(ReportFile, report_file_id)
        if report_file is not None:
            session.delete(report_file)
            session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.error("Failed to roll back report file", report_file_id=report_file_id, exc_info=True)
        raise
    log_business_event(
        AuditEvent.REPORT_UPLOAD_ROLLED_BACK,
        {"report_file_id": report_file_id, "reason": reason},
        user_id=owner_id,
    )


def ingest_report(
    session: Session,
    *,
    owner_id: int,
    buffer: bytes,
    upload_file_name: str,
    report_category: Optional[str] = None,
    report_type: Optional[str] = None,
    form_file_name: Optional[str] = None,
    request_id: Optional[str] = None,
) -> IngestionResult:
    rtype = _coerce_report_type(report_type)
    category = report_category or UPLOAD_SETTINGS["default_category"]
    file_name = resolve_file_name(form_file_name, upload_file_name)

    with timed("report_ingestion", report_type=rtype.value) as perf:
        records = decode(buffer, upload_file_name)
        if not records:
            raise NoRecordsError()

        date_range = extract_date_range(records)
        report_file = ReportFile(
            user_id=owner_id,
            file_name=file_name,
            report_category=category,
            report_type=rtype.value,
            report_date_range=date_range,
            content=json_safe_records(records),
        )
        session.add(report_file)
        session.commit()
        session.refresh(report_file)
        report_file_id = report_file.id

        schema = row_schema_for(rtype)
        try:
            rows = normalize_records(records, rtype, report_file_id)
        except NoValidRecordsError as exc:
            _rollback_report_file(session, report_file_id, exc.reason, owner_id)
            raise

        # includes driver errors SQLAlchemy does not wrap (sqlite3 OverflowError)
        try:
            _bulk_insert_rows(session, ROW_MODELS[schema], rows)
            session.commit()
        except Exception as exc:
            logger.error(
                "Bulk insert of report rows failed",
                report_file_id=report_file_id,
                rows=len(rows),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            _rollback_report_file(session, report_file_id, PersistenceFailureError.reason, owner_id)
            raise PersistenceFailureError(str(exc)) from exc
        perf["rows"] = len(rows)

    log_business_event(
        AuditEvent.REPORT_UPLOADED,
        {
            "report_file_id": report_file_id,
            "file_name": file_name,
            "report_type": rtype.value,
            "rows": len(rows),
            "date_range": date_range,
        },
        user_id=owner_id,
        request_id=request_id,
    )
    logger.info("Report uploaded", report_file_id=report_file_id, rows=len(rows))

    return IngestionResult(
        report_file_id=report_file_id,
        file_name=file_name,
        report_type=rtype.value,
        rows_inserted=len(rows),
        report_date_range=date_range,
    )


__all__ = ["IngestionResult", "ingest_report", "resolve_file_name", "json_safe_records", "ROW_MODELS"]
