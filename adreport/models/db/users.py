from __future__ import annotations
"""SQLAlchemy model for report owners (API-key authenticated sellers)."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .report_files import ReportFile
from sqlalchemy.sql import func
from adreport.database import Base

class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, unique=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    api_key: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    report_files: Mapped[list["ReportFile"]] = relationship(
        "ReportFile", back_populates="owner", cascade="all, delete-orphan"
    )
