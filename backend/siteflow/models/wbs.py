from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from siteflow.db.base import Base


class WbsItem(Base):
    __tablename__ = "wbs_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    unit: Mapped[str | None] = mapped_column(String(20), nullable=True)

    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    duration_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_payment_milestone: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    schedule_of_rates_rate: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)

    project: Mapped["Project"] = relationship("Project", back_populates="wbs_items")
    plant_assignments: Mapped[list["WbsPlantAssignment"]] = relationship(
        "WbsPlantAssignment", back_populates="wbs_item", cascade="all, delete-orphan"
    )
    labour_assignments: Mapped[list["WbsLabourAssignment"]] = relationship(
        "WbsLabourAssignment", back_populates="wbs_item", cascade="all, delete-orphan"
    )
    material_assignments: Mapped[list["WbsMaterialAssignment"]] = relationship(
        "WbsMaterialAssignment", back_populates="wbs_item", cascade="all, delete-orphan"
    )
    subcontractor_assignments: Mapped[list["WbsSubcontractorAssignment"]] = relationship(
        "WbsSubcontractorAssignment", back_populates="wbs_item", cascade="all, delete-orphan"
    )


class WbsPlantAssignment(Base):
    __tablename__ = "wbs_plant_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    wbs_item_id: Mapped[int] = mapped_column(
        ForeignKey("wbs_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    plant_type_id: Mapped[int] = mapped_column(ForeignKey("plant_types.id"), nullable=False)
    budgeted_hours: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)

    wbs_item: Mapped["WbsItem"] = relationship("WbsItem", back_populates="plant_assignments")


class WbsLabourAssignment(Base):
    __tablename__ = "wbs_labour_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    wbs_item_id: Mapped[int] = mapped_column(
        ForeignKey("wbs_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    labour_type_id: Mapped[int] = mapped_column(ForeignKey("labour_types.id"), nullable=False)
    budgeted_hours: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    # headcount
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    wbs_item: Mapped["WbsItem"] = relationship("WbsItem", back_populates="labour_assignments")


class WbsMaterialAssignment(Base):
    __tablename__ = "wbs_material_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    wbs_item_id: Mapped[int] = mapped_column(
        ForeignKey("wbs_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    material_type_id: Mapped[int] = mapped_column(ForeignKey("material_types.id"), nullable=False)
    budgeted_quantity: Mapped[Decimal] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    unit_rate: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)

    wbs_item: Mapped["WbsItem"] = relationship("WbsItem", back_populates="material_assignments")


class WbsSubcontractorAssignment(Base):
    __tablename__ = "wbs_subcontractor_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    wbs_item_id: Mapped[int] = mapped_column(
        ForeignKey("wbs_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subcontractor_type_id: Mapped[int] = mapped_column(
        ForeignKey("subcontractor_types.id"),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    budgeted_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)

    wbs_item: Mapped["WbsItem"] = relationship("WbsItem", back_populates="subcontractor_assignments")
