"""Decode uploaded report bytes into raw records.

`decode(buffer, extension)` returns an ordered list of dicts keyed by the
header text of the first row. Delimited text goes through pandas; .xlsx is
read row by row with openpyxl so fully empty spreadsheet rows survive as
records with empty values; legacy .xls goes through pandas + xlrd.
"""
from __future__ import annotations

import zipfile
from io import BytesIO
from typing import Any, Sequence

import pandas as pd
import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from adreport.config import UPLOAD_SETTINGS
from adreport.utils import get_logger
from adreport.utils.errors import DecodeError, UnsupportedFormatError

logger = get_logger(__name__)

RawRecord = dict[str, Any]


def normalize_extension(filename_or_ext: str | None) -> str:
    """'Report.XLSX' / 'xlsx' / '.xlsx' -> '.xlsx' ('' when there is none)."""
    if not filename_or_ext:
        return ""
    value = filename_or_ext.strip().lower()
    if "." in value:
        return "." + value.rsplit(".", 1)[1]
    return "." + value


def _normalize_headers(raw_headers: Sequence[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for idx, value in enumerate(raw_headers):
        base = str(value).strip() if value not in (None, "") else f"column_{idx + 1}"
        count = seen.get(base, 0)
        name = base if count == 0 else f"{base}_{count + 1}"
        seen[base] = count + 1
        headers.append(name)
    return headers


def _row_to_record(headers: list[str], row: Sequence[Any]) -> RawRecord:
    record: RawRecord = {}
    for idx, header in enumerate(headers):
        record[header] = row[idx] if idx < len(row) else None
    return record


def _decode_csv(buffer: bytes) -> list[RawRecord]:
    encoding = UPLOAD_SETTINGS["csv_encoding"]
    try:
        frame = pd.read_csv(
            BytesIO(buffer),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding=encoding,
        )
    except pd.errors.EmptyDataError:
        return []
    except (UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise DecodeError(str(exc)) from exc

    rows = frame.values.tolist()
    if not rows:
        return []
    headers = _normalize_headers(rows[0])
    records = []
    for row in rows[1:]:
        # lines made only of delimiters count as empty lines
        if all(cell is None or not str(cell).strip() for cell in row):
            continue
        records.append(_row_to_record(headers, row))
    return records


def _decode_xlsx(buffer: bytes) -> list[RawRecord]:
    try:
        workbook = load_workbook(BytesIO(buffer), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise DecodeError(str(exc)) from exc
    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        row_iter = sheet.iter_rows(values_only=True)
        header_row = next(row_iter, None)
        if header_row is None:
            return []
        headers = _normalize_headers(header_row)
        return [_row_to_record(headers, row) for row in row_iter]
    finally:
        workbook.close()


def _decode_xls(buffer: bytes) -> list[RawRecord]:
    try:
        frame = pd.read_excel(BytesIO(buffer), sheet_name=0, header=None, dtype=object, engine="xlrd")
    except (xlrd.XLRDError, ValueError, OSError) as exc:
        raise DecodeError(str(exc)) from exc

    # pandas uses NaN for empty cells; records carry None like the other decoders
    frame = frame.astype(object).where(pd.notna(frame), None)
    rows = frame.values.tolist()
    if not rows:
        return []
    headers = _normalize_headers(rows[0])
    return [_row_to_record(headers, row) for row in rows[1:]]


_DECODERS = {
    ".csv": _decode_csv,
    ".xlsx": _decode_xlsx,
    ".xls": _decode_xls,
}


def decode(buffer: bytes, extension: str) -> list[RawRecord]:
    """Decode `buffer` according to `extension` (file name or bare extension).

    Raises UnsupportedFormatError for anything outside the accepted extensions
    and DecodeError when the bytes cannot be read as the declared format. An
    empty list is a valid result; callers decide what zero records mean.
    """
    ext = normalize_extension(extension)
    if ext not in UPLOAD_SETTINGS["accepted_extensions"] or ext not in _DECODERS:
        raise UnsupportedFormatError(ext or extension)
    records = _DECODERS[ext](buffer)
    logger.debug("Decoded report buffer", extension=ext, bytes=len(buffer), records=len(records))
    return records


__all__ = ["RawRecord", "decode", "normalize_extension"]
