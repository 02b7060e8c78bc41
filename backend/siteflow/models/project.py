from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from siteflow.db.base import Base
from siteflow.models.enums import ProjectStatus


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "retention_percent >= 0 AND retention_percent <= 100",
            name="ck_projects_retention_percent_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    client: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus, name="project_status"),
        default=ProjectStatus.tender,
        nullable=False,
        index=True,
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    retention_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=5, nullable=False)
    payment_terms_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    wbs_items: Mapped[list["WbsItem"]] = relationship(
        "WbsItem", back_populates="project", cascade="all, delete-orphan"
    )
    programme_tasks: Mapped[list["ProgrammeTask"]] = relationship(
        "ProgrammeTask", back_populates="project", cascade="all, delete-orphan"
    )
    variations: Mapped[list["Variation"]] = relationship(
        "Variation", back_populates="project", cascade="all, delete-orphan"
    )
    progress_claims: Mapped[list["ProgressClaim"]] = relationship(
        "ProgressClaim", back_populates="project", cascade="all, delete-orphan"
    )
