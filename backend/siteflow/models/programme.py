from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from siteflow.db.base import Base
from siteflow.models.enums import AllocationType


class ProgrammeTask(Base):
    __tablename__ = "programme_tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    duration_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    percent_complete: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=0, nullable=False)

    project: Mapped["Project"] = relationship("Project", back_populates="programme_tasks")
    wbs_mappings: Mapped[list["ProgrammeWbsMapping"]] = relationship(
        "ProgrammeWbsMapping", back_populates="programme_task", cascade="all, delete-orphan"
    )


class ProgrammeWbsMapping(Base):
    __tablename__ = "programme_wbs_mappings"
    __table_args__ = (
        UniqueConstraint("programme_task_id", "wbs_item_id", name="uq_programme_wbs_mappings_task_wbs"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    programme_task_id: Mapped[int] = mapped_column(
        ForeignKey("programme_tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    wbs_item_id: Mapped[int] = mapped_column(
        ForeignKey("wbs_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    allocation_type: Mapped[AllocationType] = mapped_column(
        Enum(AllocationType, name="allocation_type"),
        default=AllocationType.percent,
        nullable=False,
    )
    allocation_percent: Mapped[Decimal | None] = mapped_column(Numeric(7, 3), nullable=True, default=100)
    allocation_value: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    programme_task: Mapped["ProgrammeTask"] = relationship("ProgrammeTask", back_populates="wbs_mappings")
    wbs_item: Mapped["WbsItem"] = relationship("WbsItem")
