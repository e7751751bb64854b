import csv
import io
import secrets
import sys
from pathlib import Path
import pytest
from fastapi.testclient import TestClient
import xlwt
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure project root on sys.path so 'adreport' resolves without an install
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from adreport.main import app  # type: ignore
from adreport.database import Base  # type: ignore
from adreport.api import deps  # type: ignore
"""Pytest fixtures and factories.

Important: SQLAlchemy relationship configuration requires all model modules to be imported
before Base.metadata.create_all(), otherwise back_populates targets might not exist yet.
"""
from adreport.models.db import User, ReportFile, SearchTermReport, AdPlacementReport  # noqa: F401

# Single shared in-memory connection; the API and the test body see the same data
SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def create_test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(autouse=True)
def _clean_tables(create_test_db):
    """Empty every table after each test so row counts start from zero."""
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())

@pytest.fixture()
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

# Override dependency
def _override_get_db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

app.dependency_overrides[deps.get_db] = _override_get_db

@pytest.fixture()
def client():
    return TestClient(app)

# ---------- Data factory helpers ----------

@pytest.fixture()
def user_factory(db_session):
    def _create(name: str | None = None, email: str | None = None):
        if name is None:
            name = f"Seller {secrets.token_hex(2)}"
        if email is None:
            email = f"{secrets.token_hex(4)}@example.com"
        user = User(name=name, email=email, api_key=f"ak_{secrets.token_hex(12)}")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _create

@pytest.fixture()
def auth_header(user_factory):
    user = user_factory()
    return {"Authorization": f"Bearer {user.api_key}"}, user

# ---------- Upload file builders ----------

def build_csv(headers: list[str], rows: list[list], bom: bool = True) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(headers)
    writer.writerows(rows)
    text = buf.getvalue()
    return (("\ufeff" + text) if bom else text).encode("utf-8")

def build_xlsx(headers: list[str], rows: list[list]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        ws.append(row)
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()

def build_xls(headers: list[str], rows: list[list]) -> bytes:
    """Legacy BIFF workbook; None cells are left unwritten."""
    wb = xlwt.Workbook()
    ws = wb.add_sheet("Sheet1")
    for r, row in enumerate([headers] + rows):
        for c, value in enumerate(row):
            if value is not None:
                ws.write(r, c, value)
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()

@pytest.fixture()
def csv_bytes():
    return build_csv

@pytest.fixture()
def xlsx_bytes():
    return build_xlsx

@pytest.fixture()
def xls_bytes():
    return build_xls

SEARCH_TERM_HEADERS = [
    "Date", "Campaign Name", "Ad Group Name", "Customer Search Term", "Match Type",
    "Impressions", "Clicks", "Spend", "7 Day Total Sales", "7 Day Total Orders (#)",
]

SEARCH_TERM_ROWS = [
    ["2024-01-03", "Camp A", "Group 1", "red shoes", "EXACT", 1000, 100, "50.00", "200.00", 20],
    ["2024-01-01", "Camp B", "Group 2", "red shoes", "BROAD", 10, 5, "2.50", "0", 0],
    ["2024-01-10", "Camp A", "Group 1", "blue shoes", "EXACT", 500, 10, "5.00", "30.00", 3],
    ["2024-01-05", "Camp B", "Group 2", "green hat", "PHRASE", 0, 0, "0", "0", 0],
]

PLACEMENT_HEADERS = [
    "开始日期", "结束日期", "广告活动名称", "广告位", "展示量", "点击量", "花费", "7天总销售额", "7天总订单数(#)",
]

PLACEMENT_ROWS = [
    ["2024-02-01", "2024-02-07", "Camp A", "Top of Search", 1000, 50, "25.00", "100.00", 5],
    ["2024-02-01", "2024-02-07", "Camp A", "Product Pages", 3000, 30, "15.00", "0", 0],
    ["2024-02-01", "2024-02-07", "Camp B", "Top of Search", 200, 20, "10.00", "40.00", 2],
]

@pytest.fixture()
def search_term_csv():
    return build_csv(SEARCH_TERM_HEADERS, SEARCH_TERM_ROWS)

@pytest.fixture()
def placement_xlsx():
    return build_xlsx(PLACEMENT_HEADERS, PLACEMENT_ROWS)
