"""
SQLAlchemy model for normalized placement report rows.
"""
from sqlalchemy import Column, Integer, String, Numeric, Date, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from adreport.database import Base

class AdPlacementReport(Base):
    __tablename__ = "ad_placement_reports"

    id = Column(Integer, primary_key=True, index=True)
    report_file_id = Column(Integer, ForeignKey("report_files.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # Dimensions
    campaign_name = Column(String, nullable=False, index=True)
    portfolio_name = Column(String, nullable=True)
    placement = Column(String, nullable=False)
    retailer = Column(String, nullable=True)
    region = Column(String, nullable=True)
    bidding_strategy = Column(String, nullable=True)
    currency = Column(String(8), nullable=True)

    # Base counters
    impressions = Column(Integer, default=0)
    clicks = Column(Integer, default=0)
    spend = Column(Numeric(12, 2), default=0.00)
    sales = Column(Numeric(12, 2), default=0.00)
    orders = Column(Integer, default=0)
    units_sold = Column(Integer, default=0)

    # Ratios as supplied by the report (audit only, never re-aggregated)
    ctr = Column(Numeric(12, 4), default=0)
    cpc = Column(Numeric(12, 4), default=0)
    acos = Column(Numeric(12, 4), default=0)
    roas = Column(Numeric(12, 4), default=0)
    conversion_rate = Column(Numeric(12, 4), default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    report_file = relationship("ReportFile", back_populates="placement_rows")
