from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from siteflow.db.base import Base


DEFAULT_SETTINGS_ID = "default"


class CompanySettings(Base):
    __tablename__ = "company_settings"

    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=DEFAULT_SETTINGS_ID)
    company_name: Mapped[str] = mapped_column(String(255), default="My Construction Company", nullable=False)
    default_retention_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=5, nullable=False)
    head_office_monthly_cost: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=50000, nullable=False)
    bank_facility_limit: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=500000, nullable=False)
    gst_rate: Mapped[Decimal] = mapped_column(Numeric(6, 4), default=Decimal("0.15"), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
