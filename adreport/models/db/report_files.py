from __future__ import annotations
"""SQLAlchemy model for one uploaded report file and its raw records."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .users import User
    from .search_term_reports import SearchTermReport
    from .ad_placement_reports import AdPlacementReport
from sqlalchemy.sql import func
from adreport.database import Base

class ReportFile(Base):
    __tablename__ = "report_files"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    file_name: Mapped[str] = mapped_column(String, nullable=False)
    report_category: Mapped[str | None] = mapped_column(String, nullable=True)
    report_type: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    # "YYYY-MM-DD至YYYY-MM-DD", None when no date could be read from the file
    report_date_range: Mapped[str | None] = mapped_column(String, nullable=True)
    # Raw decoded records, kept for the raw-data view
    content: Mapped[list] = mapped_column(JSON, nullable=False)

    uploaded_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    owner: Mapped["User"] = relationship("User", back_populates="report_files")
    search_term_rows: Mapped[list["SearchTermReport"]] = relationship(
        "SearchTermReport", back_populates="report_file", cascade="all, delete-orphan", passive_deletes=True
    )
    placement_rows: Mapped[list["AdPlacementReport"]] = relationship(
        "AdPlacementReport", back_populates="report_file", cascade="all, delete-orphan", passive_deletes=True
    )
