from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from siteflow.db.base import Base
from siteflow.models.enums import ClaimStatus, VariationStatus


class Variation(Base):
    __tablename__ = "variations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    variation_number: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[VariationStatus] = mapped_column(
        Enum(VariationStatus, name="variation_status"),
        default=VariationStatus.draft,
        nullable=False,
    )
    claimed_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    approved_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)

    project: Mapped["Project"] = relationship("Project", back_populates="variations")


class ProgressClaim(Base):
    __tablename__ = "progress_claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    claim_number: Mapped[int] = mapped_column(Integer, nullable=False)
    claim_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    claim_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    submitted_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    this_claim: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    certified_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    status: Mapped[ClaimStatus] = mapped_column(
        Enum(ClaimStatus, name="claim_status"),
        default=ClaimStatus.draft,
        nullable=False,
    )

    project: Mapped["Project"] = relationship("Project", back_populates="progress_claims")
