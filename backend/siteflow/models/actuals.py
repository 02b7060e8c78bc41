from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from siteflow.db.base import Base
from siteflow.models.enums import CostType


class DailyLog(Base):
    __tablename__ = "daily_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    log_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    plant_hours: Mapped[list["ActualPlantHours"]] = relationship(
        "ActualPlantHours", back_populates="daily_log", cascade="all, delete-orphan"
    )
    labour_hours: Mapped[list["ActualLabourHours"]] = relationship(
        "ActualLabourHours", back_populates="daily_log", cascade="all, delete-orphan"
    )
    materials: Mapped[list["ActualMaterial"]] = relationship(
        "ActualMaterial", back_populates="daily_log", cascade="all, delete-orphan"
    )
    quantities: Mapped[list["ActualQuantity"]] = relationship(
        "ActualQuantity", back_populates="daily_log", cascade="all, delete-orphan"
    )


class ActualPlantHours(Base):
    __tablename__ = "actual_plant_hours"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    daily_log_id: Mapped[int] = mapped_column(
        ForeignKey("daily_logs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    wbs_item_id: Mapped[int] = mapped_column(ForeignKey("wbs_items.id"), nullable=False)
    plant_type_id: Mapped[int] = mapped_column(ForeignKey("plant_types.id"), nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)

    daily_log: Mapped["DailyLog"] = relationship("DailyLog", back_populates="plant_hours")


class ActualLabourHours(Base):
    __tablename__ = "actual_labour_hours"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    daily_log_id: Mapped[int] = mapped_column(
        ForeignKey("daily_logs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    wbs_item_id: Mapped[int] = mapped_column(ForeignKey("wbs_items.id"), nullable=False)
    labour_type_id: Mapped[int] = mapped_column(ForeignKey("labour_types.id"), nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    workers: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    daily_log: Mapped["DailyLog"] = relationship("DailyLog", back_populates="labour_hours")


class ActualMaterial(Base):
    __tablename__ = "actual_materials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    daily_log_id: Mapped[int] = mapped_column(
        ForeignKey("daily_logs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    wbs_item_id: Mapped[int] = mapped_column(ForeignKey("wbs_items.id"), nullable=False)
    material_type_id: Mapped[int] = mapped_column(ForeignKey("material_types.id"), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    docket_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    daily_log: Mapped["DailyLog"] = relationship("DailyLog", back_populates="materials")


class ActualQuantity(Base):
    __tablename__ = "actual_quantities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    daily_log_id: Mapped[int] = mapped_column(
        ForeignKey("daily_logs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    wbs_item_id: Mapped[int] = mapped_column(ForeignKey("wbs_items.id"), nullable=False, index=True)
    quantity_completed: Mapped[Decimal] = mapped_column(Numeric(18, 4), default=0, nullable=False)

    daily_log: Mapped["DailyLog"] = relationship("DailyLog", back_populates="quantities")


class CostEntry(Base):
    __tablename__ = "cost_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    wbs_item_id: Mapped[int | None] = mapped_column(ForeignKey("wbs_items.id"), nullable=True)
    cost_type: Mapped[CostType] = mapped_column(Enum(CostType, name="cost_type"), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    invoice_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
