import numbers

import pytest

from adreport.services.tabular_decoder import decode, normalize_extension
from adreport.utils.errors import DecodeError, UnsupportedFormatError


def test_csv_uses_first_row_as_headers(csv_bytes):
    data = csv_bytes(["Campaign Name", "Impressions"], [["A", "10"], ["B", "20"]])
    records = decode(data, "report.csv")
    assert records == [
        {"Campaign Name": "A", "Impressions": "10"},
        {"Campaign Name": "B", "Impressions": "20"},
    ]


def test_csv_bom_is_stripped_from_first_header(csv_bytes):
    records = decode(csv_bytes(["Date", "Clicks"], [["2024-01-01", "3"]], bom=True), ".csv")
    assert list(records[0].keys()) == ["Date", "Clicks"]


def test_csv_skips_empty_lines():
    data = "Campaign Name,Clicks\nA,1\n\n,\nB,2\n".encode("utf-8")
    records = decode(data, "csv")
    assert [r["Campaign Name"] for r in records] == ["A", "B"]


def test_csv_with_header_only_has_no_records():
    assert decode("Campaign Name,Clicks\n".encode("utf-8"), ".csv") == []
    assert decode(b"", ".csv") == []


def test_xlsx_keeps_blank_rows_as_records(xlsx_bytes):
    data = xlsx_bytes(["Campaign Name", "Clicks"], [["A", 1], [None, None], ["B", 2]])
    records = decode(data, "Report.XLSX")
    assert len(records) == 3
    assert records[1] == {"Campaign Name": None, "Clicks": None}
    assert records[2] == {"Campaign Name": "B", "Clicks": 2}


def test_xlsx_duplicate_headers_are_disambiguated(xlsx_bytes):
    records = decode(xlsx_bytes(["Clicks", "Clicks"], [[1, 2]]), ".xlsx")
    assert records == [{"Clicks": 1, "Clicks_2": 2}]


def test_xls_keeps_blank_rows_and_numeric_cells(xls_bytes):
    data = xls_bytes(["Campaign Name", "Clicks"], [["A", 1], [None, None], ["B", 2]])
    records = decode(data, "legacy.xls")
    assert list(records[0].keys()) == ["Campaign Name", "Clicks"]
    assert len(records) == 3
    assert records[1] == {"Campaign Name": None, "Clicks": None}
    assert records[0]["Campaign Name"] == "A"
    assert records[2]["Clicks"] == 2
    assert isinstance(records[0]["Clicks"], numbers.Number)


def test_corrupt_workbook_raises_decode_error():
    with pytest.raises(DecodeError):
        decode(b"definitely not a zip archive", "broken.xlsx")


@pytest.mark.parametrize("name", ["report.pdf", "report.json", "report", ""])
def test_unsupported_extension(name):
    with pytest.raises(UnsupportedFormatError) as exc_info:
        decode(b"a,b\n1,2\n", name)
    assert exc_info.value.reason == "unsupported_format"


def test_normalize_extension():
    assert normalize_extension("Sales.Report.XLS") == ".xls"
    assert normalize_extension("csv") == ".csv"
    assert normalize_extension(None) == ""
