from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from siteflow.models.wbs import (
    WbsItem,
    WbsLabourAssignment,
    WbsMaterialAssignment,
    WbsPlantAssignment,
    WbsSubcontractorAssignment,
)
from siteflow.utils.decimal_math import dec


ZERO = Decimal("0")


@dataclass(frozen=True)
class CategoryCosts:
    plant: Decimal = ZERO
    labour: Decimal = ZERO
    material: Decimal = ZERO
    subcontractor: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.plant + self.labour + self.material + self.subcontractor

    def scaled(self, factor: Decimal) -> CategoryCosts:
        return CategoryCosts(
            plant=self.plant * factor,
            labour=self.labour * factor,
            material=self.material * factor,
            subcontractor=self.subcontractor * factor,
        )


def _sum_by_item(db: Session, model, amount_expr, item_ids: list[int]) -> dict[int, Decimal]:
    rows = db.execute(
        select(model.wbs_item_id, func.coalesce(func.sum(amount_expr), 0))
        .where(model.wbs_item_id.in_(item_ids))
        .group_by(model.wbs_item_id)
    ).all()
    return {item_id: dec(total) for item_id, total in rows}


def resolve_costs_bulk(db: Session, wbs_item_ids: Iterable[int]) -> dict[int, CategoryCosts]:
    """Budgeted category costs for many WBS items in four grouped queries.

    Items without assignments are present in the result with zero costs.
    """
    item_ids = sorted(set(wbs_item_ids))
    if not item_ids:
        return {}

    plant = _sum_by_item(
        db,
        WbsPlantAssignment,
        WbsPlantAssignment.budgeted_hours * WbsPlantAssignment.hourly_rate,
        item_ids,
    )
    labour = _sum_by_item(
        db,
        WbsLabourAssignment,
        WbsLabourAssignment.budgeted_hours * WbsLabourAssignment.hourly_rate * WbsLabourAssignment.quantity,
        item_ids,
    )
    material = _sum_by_item(
        db,
        WbsMaterialAssignment,
        WbsMaterialAssignment.budgeted_quantity * WbsMaterialAssignment.unit_rate,
        item_ids,
    )
    subcontractor = _sum_by_item(
        db,
        WbsSubcontractorAssignment,
        WbsSubcontractorAssignment.budgeted_value,
        item_ids,
    )

    return {
        item_id: CategoryCosts(
            plant=plant.get(item_id, ZERO),
            labour=labour.get(item_id, ZERO),
            material=material.get(item_id, ZERO),
            subcontractor=subcontractor.get(item_id, ZERO),
        )
        for item_id in item_ids
    }


def resolve_costs(db: Session, wbs_item_id: int) -> CategoryCosts:
    return resolve_costs_bulk(db, [wbs_item_id])[wbs_item_id]


def project_budget_total(db: Session, project_id: int) -> Decimal:
    item_ids = list(db.scalars(select(WbsItem.id).where(WbsItem.project_id == project_id)).all())
    costs = resolve_costs_bulk(db, item_ids)
    return sum((row.total for row in costs.values()), ZERO)
